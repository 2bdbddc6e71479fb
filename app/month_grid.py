"""
Month grids for the calendar view.

Months are (year, month) pairs with 1-based months. Weeks start on Sunday.
"""

import calendar
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from ebb_forecast.dates import format_date

Month = Tuple[int, int]

MONTH_NAMES = [calendar.month_name[m] for m in range(1, 13)]
WEEKDAYS = ["S", "M", "T", "W", "T", "F", "S"]


def add_months(year: int, month: int, delta: int) -> Month:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def generate_months(year: int, month: int, count: int) -> List[Month]:
    """``count`` months starting with (year, month)."""
    return [add_months(year, month, i) for i in range(count)]


def months_before(year: int, month: int, count: int) -> List[Month]:
    """The ``count`` months preceding (year, month), oldest first."""
    return [add_months(year, month, -i) for i in range(count, 0, -1)]


def month_window(
    today: date, past: int, future: int, shift: int = 0, batch: int = 6
) -> List[Month]:
    """Months around today's month, moved by ``shift`` batches."""
    year, month = add_months(today.year, today.month, shift * batch)
    return months_before(year, month, past) + generate_months(year, month, future + 1)


def window_range(months: Sequence[Month]) -> Tuple[str, str]:
    """First and last calendar day covered by the window."""
    first_year, first_month = months[0]
    last_year, last_month = months[-1]
    last_day = calendar.monthrange(last_year, last_month)[1]
    return format_date(first_year, first_month, 1), format_date(last_year, last_month, last_day)


def build_month(
    year: int,
    month: int,
    logs: Mapping[str, Sequence[Mapping[str, Any]]],
    predicted: Set[str],
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Lay out one month as weeks of day cells.

    A day with a real period log is never shown as predicted.
    """
    today = today or date.today()
    # calendar.weekday is Monday=0; shift so Sunday is the first column
    first_column = (calendar.weekday(year, month, 1) + 1) % 7
    days_in_month = calendar.monthrange(year, month)[1]

    cells: List[Optional[Dict[str, Any]]] = [None] * first_column
    for day in range(1, days_in_month + 1):
        date_str = format_date(year, month, day)
        types = {log["type"] for log in logs.get(date_str, [])}
        has_period = "period" in types
        cells.append(
            {
                "date": date_str,
                "day": day,
                "has_period": has_period,
                "has_cramps": "cramps" in types,
                "has_sex": "sex" in types,
                "is_predicted": not has_period and date_str in predicted,
                "is_today": (year, month, day) == (today.year, today.month, today.day),
            }
        )

    cells.extend([None] * (-len(cells) % 7))
    weeks = [cells[i:i + 7] for i in range(0, len(cells), 7)]

    return {
        "key": f"{year}-{month}",
        "title": f"{MONTH_NAMES[month - 1]} {year}",
        "year": year,
        "month": month,
        "weeks": weeks,
    }
