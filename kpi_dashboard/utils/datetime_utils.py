"""
Date and datetime utilities.

This module keeps calendar handling for KPI entries and reports in one
place: UTC timestamps for storage, weekday names for entries, and working
day walks for the missing-entry report.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Iterator, Optional

# UTC timezone constant
UTC = timezone.utc

_WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Returns:
        datetime: Current UTC time with tzinfo set to UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware and in UTC.

    SQLite drops tzinfo on round-trip, so naive values read back from the
    database are treated as UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def weekday_name(day: date) -> str:
    """
    English weekday name for a date.

    Example:
        >>> weekday_name(date(2024, 1, 20))
        'Saturday'
    """
    return _WEEKDAY_NAMES[day.weekday()]


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def month_to_date(today: date, skip_weekends: bool = True) -> Iterator[date]:
    """
    Yield each day from the first of today's month up to and including today.

    Args:
        today: Last day to yield
        skip_weekends: Leave out Saturdays and Sundays
    """
    current = today.replace(day=1)
    while current <= today:
        if not (skip_weekends and is_weekend(current)):
            yield current
        current += timedelta(days=1)


def in_periods(day: date, years: Iterable[int], months: Iterable[int]) -> bool:
    """Check whether a date falls in any of the given years and months (1-12).

    An empty selection matches every year (or month).
    """
    years = set(years)
    months = set(months)
    return (not years or day.year in years) and (not months or day.month in months)
