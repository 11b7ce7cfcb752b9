from __future__ import annotations

import re
from datetime import date, timedelta

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_time_of_day(value: str) -> int:
    """Parse HH:MM (24h) into minutes since midnight. Raises ValueError if malformed."""
    match = TIME_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time_of_day(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: str) -> str:
    return format_time_of_day(parse_time_of_day(value))


def parse_calendar_date(value: str) -> date:
    """Parse YYYY-MM-DD into a date. Raises ValueError for malformed or impossible dates."""
    if not DATE_PATTERN.match(value or ""):
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    return date.fromisoformat(value)


def weekday_index(day: date) -> int:
    """Weekday with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7


def validate_weekday(weekday: int) -> int:
    # bool is an int subclass; True must not pass as Monday
    if isinstance(weekday, bool) or not isinstance(weekday, int) or not 0 <= weekday <= 6:
        raise ValueError(f"Invalid weekday {weekday!r}, expected 0 (Sunday) to 6 (Saturday)")
    return weekday


def sorted_slots(slots) -> tuple[str, ...]:
    return tuple(sorted(set(slots), key=parse_time_of_day))


def generate_range(start: str, end: str, step_minutes: int) -> tuple[str, ...]:
    """Evenly spaced slots from start up to, but not including, end."""
    start_min = parse_time_of_day(start)
    end_min = parse_time_of_day(end)
    return tuple(format_time_of_day(m) for m in range(start_min, end_min, step_minutes))


def week_dates(day: date) -> list[date]:
    """The seven dates, Sunday to Saturday, of the week containing day."""
    sunday = day - timedelta(days=weekday_index(day))
    return [sunday + timedelta(days=offset) for offset in range(7)]
