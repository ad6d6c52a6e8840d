"""Periodic trigger for the reminder engine."""

import logging
from dataclasses import dataclass, field

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from meal_coach.domain.reminders import NagTickResult
from meal_coach.services.reminders import NagEngine

_logger = logging.getLogger(__name__)

NAG_JOB_ID = "nag-check"


@dataclass
class ReminderScheduler:
    """Runs nag ticks on a fixed interval inside the event loop.

    A tick still running when the next one is due causes the next one to
    be skipped rather than queued.
    """

    engine: NagEngine
    interval_seconds: int = 60
    scheduler: AsyncIOScheduler = field(default_factory=AsyncIOScheduler)

    def start(self) -> None:
        """Register the nag job and start the scheduler."""
        self.scheduler.add_job(
            self.run_tick,
            "interval",
            seconds=self.interval_seconds,
            id=NAG_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.scheduler.start()
        _logger.info("Reminder scheduler started (every %ss)", self.interval_seconds)

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    async def run_tick(self) -> NagTickResult | None:
        """Run one tick; failures are logged so later ticks still run."""
        try:
            return await self.engine.tick()
        except Exception:
            _logger.exception("Nag tick failed")
            return None
