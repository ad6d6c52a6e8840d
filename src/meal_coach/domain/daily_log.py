"""Domain models for the per-day log."""

from dataclasses import dataclass, field
from datetime import datetime

from meal_coach.domain.nutrition import NutritionSummary


@dataclass(frozen=True)
class LogEntry:
    """Audit record of a single consumption delta."""

    at: datetime
    items: list[object]
    summary: NutritionSummary

    def to_document(self) -> dict[str, object]:
        return {
            "at": self.at.isoformat(),
            "items": list(self.items),
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_document(cls, data: dict[str, object]) -> "LogEntry":
        items = data.get("items")
        summary = data.get("summary")
        return cls(
            at=datetime.fromisoformat(str(data["at"])),
            items=list(items) if isinstance(items, list) else [],
            summary=NutritionSummary.from_mapping(
                summary if isinstance(summary, dict) else None
            ),
        )


@dataclass
class DailyLog:
    """Check-ins and accumulated consumption for one calendar date."""

    date: str
    checkins: dict[str, bool] = field(default_factory=dict)
    consumed: NutritionSummary = field(default_factory=NutritionSummary)
    entries: list[LogEntry] = field(default_factory=list)

    def is_checked_in(self, slot_id: str) -> bool:
        return bool(self.checkins.get(slot_id))

    def to_document(self) -> dict[str, object]:
        return {
            "date": self.date,
            "checkins": dict(self.checkins),
            "consumed": self.consumed.to_dict(),
            "entries": [entry.to_document() for entry in self.entries],
        }

    @classmethod
    def from_document(cls, data: dict[str, object]) -> "DailyLog":
        checkins = data.get("checkins")
        consumed = data.get("consumed")
        entries = data.get("entries")
        return cls(
            date=str(data["date"]),
            checkins=(
                {str(key): bool(value) for key, value in checkins.items() if value}
                if isinstance(checkins, dict)
                else {}
            ),
            consumed=NutritionSummary.from_mapping(
                consumed if isinstance(consumed, dict) else None
            ),
            entries=(
                [LogEntry.from_document(entry) for entry in entries]
                if isinstance(entries, list)
                else []
            ),
        )
