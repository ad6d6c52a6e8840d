"""Wall-clock helpers for meal windows and quiet hours."""

from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from meal_coach.domain.errors import ParseError

if TYPE_CHECKING:
    from meal_coach.domain.settings import QuietHours

Clock = Callable[[], datetime]


def minutes_of_day(hhmm: str) -> int:
    """Parse an HH:MM string into minutes since midnight."""
    if not isinstance(hhmm, str) or ":" not in hhmm:
        raise ParseError(message=f"Expected HH:MM, got {hhmm!r}")
    hours, _, minutes = hhmm.strip().partition(":")
    try:
        return int(hours) * 60 + int(minutes)
    except ValueError as exc:
        raise ParseError(message=f"Expected HH:MM, got {hhmm!r}") from exc


def is_quiet_now(now_minutes: int, quiet: "QuietHours") -> bool:
    """Return True when now falls inside the quiet window.

    Equal start and end disable quiet hours. A start later than the end
    wraps past midnight.
    """
    start = minutes_of_day(quiet.start)
    end = minutes_of_day(quiet.end)
    if start == end:
        return False
    if start < end:
        return start <= now_minutes < end
    return now_minutes >= start or now_minutes < end


def minutes_since_midnight(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def date_key(moment: date) -> str:
    """Return the YYYY-MM-DD key used for daily logs."""
    return moment.strftime("%Y-%m-%d")


def system_clock(timezone_name: str) -> Clock:
    """Return a clock producing aware datetimes in the given timezone."""
    tz = ZoneInfo(timezone_name)

    def now() -> datetime:
        return datetime.now(tz=tz)

    return now
