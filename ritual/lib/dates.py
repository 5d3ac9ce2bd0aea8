"""Calendar-day keys.

Every date the store and the streak engine handle is a ``YYYY-MM-DD`` string
in local calendar time. Nothing here normalizes to UTC.
"""

from datetime import date, datetime, timedelta

from dateutil import parser as dateutil_parser
from dateutil.parser import ParserError

from . import clock

__all__ = [
    "DateKey",
    "from_key",
    "is_today",
    "is_yesterday",
    "iso_timestamp",
    "offset",
    "parse_date_arg",
    "to_key",
    "today",
    "weekday",
    "yesterday",
]

DateKey = str

DATE_FORMAT = "%Y-%m-%d"

_DAY_ALIASES = {
    "sunday": "sun",
    "monday": "mon",
    "tuesday": "tue",
    "wednesday": "wed",
    "thursday": "thu",
    "friday": "fri",
    "saturday": "sat",
}
# Sunday-first, matching Habit.target_days
DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def to_key(day: date) -> DateKey:
    return day.strftime(DATE_FORMAT)


def from_key(key: DateKey) -> date:
    return date.fromisoformat(key)


def today() -> DateKey:
    return to_key(clock.today())


def yesterday() -> DateKey:
    return offset(today(), 1)


def offset(key: DateKey, days: int) -> DateKey:
    """Shift a key by ``days`` into the past (negative moves forward)."""
    return to_key(from_key(key) - timedelta(days=days))


def weekday(key: DateKey) -> int:
    """0=Sunday .. 6=Saturday."""
    return from_key(key).isoweekday() % 7


def is_today(key: DateKey) -> bool:
    return key == today()


def is_yesterday(key: DateKey) -> bool:
    return key == yesterday()


def iso_timestamp() -> str:
    return clock.now().isoformat()


def parse_date_arg(text: str) -> DateKey | None:
    """Parses a check-in date ('today', 'yesterday', 'mon', 'YYYY-MM-DD', '3 jan').

    Weekday names resolve to the most recent such day, today included.
    """
    lowered = text.strip().lower()
    current = clock.today()

    if lowered == "today":
        return to_key(current)
    if lowered == "yesterday":
        return to_key(current - timedelta(days=1))
    lowered = _DAY_ALIASES.get(lowered, lowered)
    if lowered in DAY_NAMES:
        target = DAY_NAMES.index(lowered)
        days_back = (current.isoweekday() % 7 - target) % 7
        return to_key(current - timedelta(days=days_back))
    try:
        parsed = dateutil_parser.parse(
            text, default=datetime(current.year, current.month, current.day)
        )
    except (ParserError, ValueError, OverflowError):
        return None
    return to_key(parsed.date())
