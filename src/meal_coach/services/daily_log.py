"""Daily log service: check-ins and consumption accumulation."""

from dataclasses import dataclass, field

from meal_coach.domain.daily_log import DailyLog, LogEntry
from meal_coach.domain.errors import ValidationError
from meal_coach.domain.nutrition import NutritionSummary, remaining
from meal_coach.services.locks import KeyedLocks
from meal_coach.services.preferences import PreferencesService
from meal_coach.services.storage import DocumentStore, log_key
from meal_coach.time_utils import Clock, date_key


@dataclass(frozen=True)
class ConsumptionUpdate:
    """Consumed totals and remaining needs after logging a meal."""

    consumed: NutritionSummary
    remaining: dict[str, float]


@dataclass
class DailyLogService:
    """Owns every read-modify-write on a date's log.

    All mutations for one date run under that date's lock.
    """

    store: DocumentStore
    preferences: PreferencesService
    clock: Clock
    locks: KeyedLocks = field(default_factory=KeyedLocks)

    def today(self) -> str:
        return date_key(self.clock())

    async def ensure_log(self, date: str) -> DailyLog:
        """Return the log for date, creating a blank one if absent."""
        async with self.locks.hold(date):
            return self._load_or_create(date)

    async def record_checkin(self, date: str, slot_id: str | None) -> DailyLog:
        """Mark a slot as checked in; repeated calls are harmless."""
        if not slot_id or not str(slot_id).strip():
            raise ValidationError("slot_id_required")
        async with self.locks.hold(date):
            log = self._load_or_create(date)
            log.checkins[str(slot_id)] = True
            self.store.set(log_key(date), log.to_document())
            return log

    async def record_consumption(
        self,
        date: str,
        delta: NutritionSummary,
        items: list[object] | None = None,
    ) -> ConsumptionUpdate:
        """Add a delta to the day's consumption and append an audit entry."""
        async with self.locks.hold(date):
            log = self._load_or_create(date)
            log.consumed = log.consumed.plus(delta)
            log.entries.append(
                LogEntry(at=self.clock(), items=list(items or []), summary=delta)
            )
            self.store.set(log_key(date), log.to_document())
        targets = self.preferences.get_targets()
        return ConsumptionUpdate(
            consumed=log.consumed,
            remaining=remaining(targets, log.consumed.to_dict()),
        )

    async def get_status(self, date: str) -> dict[str, object]:
        """Return targets, consumption and check-ins for a date."""
        log = await self.ensure_log(date)
        targets = self.preferences.get_targets()
        consumed = log.consumed.to_dict()
        return {
            "date": date,
            "targets": targets,
            "consumed": consumed,
            "remaining": remaining(targets, consumed),
            "checkins": dict(log.checkins),
        }

    def _load_or_create(self, date: str) -> DailyLog:
        document = self.store.get(log_key(date))
        if document is not None:
            return DailyLog.from_document(document)
        log = DailyLog(date=date)
        self.store.set(log_key(date), log.to_document())
        return log
