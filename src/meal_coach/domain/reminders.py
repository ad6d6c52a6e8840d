"""Reminder payloads and tick outcomes."""

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum

from meal_coach.domain.settings import MealSlot


@dataclass(frozen=True)
class ReminderPayload:
    """Notification shown by the client; same tag replaces earlier ones."""

    title: str
    body: str
    tag: str

    def to_json(self) -> str:
        return json.dumps(asdict(self))


class TickStatus(str, Enum):
    """Why a nag tick ended."""

    NOT_CONFIGURED = "not_configured"
    QUIET_HOURS = "quiet_hours"
    COMPLETED = "completed"


@dataclass(frozen=True)
class NagTickResult:
    """Outcome of one evaluation pass."""

    status: TickStatus
    date: str | None = None
    reminded: list[str] = field(default_factory=list)


def build_meal_reminder(
    slot: MealSlot, remaining: Mapping[str, float]
) -> ReminderPayload:
    """Build the check-in reminder for a slot."""
    protein = format_servings(remaining.get("protein_servings", 0))
    veg = format_servings(remaining.get("veg_servings", 0))
    carbs = format_servings(remaining.get("carb_servings", 0))
    return ReminderPayload(
        title=f"Check-in: {slot.label}",
        body=f"Please confirm. Remaining: P {protein}, V {veg}, C {carbs}",
        tag=f"meal-{slot.id}",
    )


def push_test_payload() -> ReminderPayload:
    return ReminderPayload(title="Meal Coach", body="Test reminder", tag="test")


def format_servings(value: float) -> str:
    """Round to one decimal and drop a trailing .0."""
    text = f"{value:.1f}"
    return text[:-2] if text.endswith(".0") else text
