"""Reminder settings and daily targets documents."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from meal_coach.domain.errors import ParseError
from meal_coach.domain.nutrition import DEFAULT_TARGETS
from meal_coach.time_utils import minutes_of_day


def _check_clock(value: str) -> str:
    try:
        minutes = minutes_of_day(value)
    except ParseError as exc:
        raise ValueError(str(exc)) from exc
    if not 0 <= minutes < 24 * 60:
        raise ValueError(f"Time out of range: {value}")
    return value


ClockTime = Annotated[str, AfterValidator(_check_clock)]


class QuietHours(BaseModel):
    """Daily window in which no reminders are sent."""

    start: ClockTime = "22:00"
    end: ClockTime = "07:00"


class MealSlot(BaseModel):
    """A meal with its target time and reminder window."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1, pattern=r"^[A-Za-z0-9_-]+$")
    label: str
    time: ClockTime
    window_minutes: int = Field(default=120, ge=0, alias="windowMinutes")

    @property
    def start_minutes(self) -> int:
        return minutes_of_day(self.time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.window_minutes

    def is_open(self, now_minutes: int) -> bool:
        """Return True when now lies within the inclusive slot window."""
        return self.start_minutes <= now_minutes <= self.end_minutes


def _default_meals() -> list[MealSlot]:
    return [
        MealSlot(id="breakfast", label="Breakfast", time="09:00", window_minutes=120),
        MealSlot(id="lunch", label="Lunch", time="13:00", window_minutes=120),
        MealSlot(id="snack", label="Snack", time="16:30", window_minutes=120),
        MealSlot(id="dinner", label="Dinner", time="19:30", window_minutes=150),
    ]


class ReminderSettings(BaseModel):
    """User-editable reminder configuration."""

    model_config = ConfigDict(populate_by_name=True)

    interval_minutes: int = Field(default=20, gt=0, alias="intervalMinutes")
    quiet_hours: QuietHours = Field(default_factory=QuietHours, alias="quietHours")
    meals: list[MealSlot] = Field(default_factory=_default_meals)

    @model_validator(mode="after")
    def _unique_slot_ids(self) -> "ReminderSettings":
        ids = [slot.id for slot in self.meals]
        if len(ids) != len(set(ids)):
            raise ValueError("Meal slot ids must be unique")
        return self

    def to_document(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class Targets(BaseModel):
    """Daily nutrition goals."""

    protein_servings: float = Field(default=DEFAULT_TARGETS["protein_servings"], ge=0)
    veg_servings: float = Field(default=DEFAULT_TARGETS["veg_servings"], ge=0)
    carb_servings: float = Field(default=DEFAULT_TARGETS["carb_servings"], ge=0)
    snack_servings: float = Field(default=DEFAULT_TARGETS["snack_servings"], ge=0)
    water_ml: float = Field(default=DEFAULT_TARGETS["water_ml"], ge=0)

    def to_document(self) -> dict[str, float]:
        return self.model_dump()
