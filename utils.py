import math
from datetime import date, time, timedelta

from constants import DAYS_PER_WEEK, DEFAULT_SHIFTS_PER_WEEK, WEEKDAY_NAMES, WEEKEND_DAY_NAMES


def parse_hhmm(value) -> int:
    """Return minutes since midnight for an 'HH:MM' string or a `datetime.time`."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        raise ValueError(f"Expected 'HH:MM' time, got {value!r}")
    parts = value.strip().split(':')
    if len(parts) < 2:
        raise ValueError(f"Expected 'HH:MM' time, got {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def minutes_between(start, end) -> int:
    """Signed difference in minutes, end minus start, both on the same day."""
    return parse_hhmm(end) - parse_hhmm(start)


def calculate_shift_hours(start_time, end_time, break_minutes: int = 0) -> float:
    """Paid hours of a shift; an end before the start wraps past midnight."""
    minutes = minutes_between(start_time, end_time)
    if minutes < 0:
        minutes += 24 * 60
    minutes -= break_minutes or 0
    return minutes / 60


def calculate_shifts_per_week(weekly_hours, daily_max_hours) -> int:
    if not weekly_hours or not daily_max_hours:
        return DEFAULT_SHIFTS_PER_WEEK
    return max(0, math.ceil(weekly_hours / daily_max_hours))


def week_dates(reference: date | None = None) -> list[date]:
    """Monday-first 7-date window containing `reference` (default: today)."""
    reference = reference or date.today()
    monday = reference - timedelta(days=reference.weekday())
    return [monday + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def is_weekend(day: date) -> bool:
    return weekday_name(day) in WEEKEND_DAY_NAMES


def parse_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))
