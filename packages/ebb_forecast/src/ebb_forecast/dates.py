"""
Calendar-day helpers.

Every date handled by the forecaster is a plain ``datetime.date``; strings are
zero-padded ISO ``YYYY-MM-DD`` so they also sort chronologically.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List, Union

DATE_FORMAT = "%Y-%m-%d"

DayLike = Union[str, date]


def parse_day(value: DayLike) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a date through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD.") from None


def format_day(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_date(year: int, month: int, day: int) -> str:
    """Format a 1-based (year, month, day) triple as ``YYYY-MM-DD``."""
    return f"{year:04d}-{month:02d}-{day:02d}"


def add_days(value: DayLike, days: int) -> str:
    return format_day(parse_day(value) + timedelta(days=days))


def days_between(a: DayLike, b: DayLike) -> int:
    """Whole days from ``a`` to ``b`` (negative if ``b`` is earlier)."""
    return (parse_day(b) - parse_day(a)).days


def dates_between(a: DayLike, b: DayLike) -> List[str]:
    """Every day from ``a`` to ``b`` inclusive, in either argument order."""
    start, end = sorted((parse_day(a), parse_day(b)))
    return [format_day(start + timedelta(days=i)) for i in range((end - start).days + 1)]
