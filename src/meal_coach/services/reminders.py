"""Meal check-in reminder engine."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from meal_coach.domain.daily_log import DailyLog
from meal_coach.domain.nutrition import remaining
from meal_coach.domain.reminders import NagTickResult, TickStatus, build_meal_reminder
from meal_coach.domain.settings import MealSlot
from meal_coach.services.daily_log import DailyLogService
from meal_coach.services.nag_state import NagStateStore
from meal_coach.services.notifications import NotificationService
from meal_coach.services.preferences import PreferencesService
from meal_coach.time_utils import Clock, date_key, is_quiet_now, minutes_since_midnight

_logger = logging.getLogger(__name__)


@dataclass
class NagEngine:
    """Decides, once per tick, which meal slots need a reminder.

    Per (date, slot) the lifecycle is: not reminded, then reminded at most
    once per interval while the window is open, until the slot is checked
    in. Apart from the injected state store the engine keeps nothing
    between ticks, so it behaves the same under any tick cadence.
    """

    preferences: PreferencesService
    daily_logs: DailyLogService
    notifications: NotificationService
    nag_state: NagStateStore
    clock: Clock

    async def tick(self) -> NagTickResult:
        """Run one evaluation pass and dispatch every due reminder."""
        if not self.notifications.is_configured:
            return NagTickResult(status=TickStatus.NOT_CONFIGURED)

        settings = self.preferences.get_settings()
        targets = self.preferences.get_targets()
        now = self.clock()
        now_minutes = minutes_since_midnight(now)
        if is_quiet_now(now_minutes, settings.quiet_hours):
            _logger.debug("Nag tick skipped: quiet hours")
            return NagTickResult(status=TickStatus.QUIET_HOURS)

        today = date_key(now)
        log = await self.daily_logs.ensure_log(today)
        needs = remaining(targets, log.consumed.to_dict())
        interval = timedelta(minutes=settings.interval_minutes)

        reminded: list[str] = []
        for slot in settings.meals:
            try:
                if await self._remind_if_due(slot, log, today, now, interval, needs):
                    reminded.append(slot.id)
            except Exception:
                _logger.exception("Reminder evaluation failed for slot %s", slot.id)
        return NagTickResult(status=TickStatus.COMPLETED, date=today, reminded=reminded)

    async def _remind_if_due(  # noqa: PLR0913
        self,
        slot: MealSlot,
        log: DailyLog,
        today: str,
        now: datetime,
        interval: timedelta,
        needs: dict[str, float],
    ) -> bool:
        if not self._is_due(slot, log, today, now, interval):
            return False
        payload = build_meal_reminder(slot, needs)
        try:
            result = await self.notifications.dispatch(payload)
        except Exception:
            _logger.exception("Reminder dispatch failed for slot %s", slot.id)
        else:
            _logger.info(
                "Reminder for %s sent to %s subscriber(s)", slot.id, result.sent
            )
        self.nag_state.mark_sent(today, slot.id, now)
        return True

    def _is_due(  # noqa: PLR0913
        self,
        slot: MealSlot,
        log: DailyLog,
        today: str,
        now: datetime,
        interval: timedelta,
    ) -> bool:
        if not slot.is_open(minutes_since_midnight(now)):
            return False
        if log.is_checked_in(slot.id):
            return False
        last_sent = self.nag_state.last_sent(today, slot.id)
        if last_sent is None:
            return True
        # Elapsed time in UTC; same-zone subtraction ignores DST shifts.
        return now.astimezone(UTC) - last_sent.astimezone(UTC) >= interval
