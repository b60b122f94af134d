"""
Calendar helpers.

Everything works on year/month/day components. Nothing here goes through a
timestamp, so results do not depend on the server's time zone.
"""

import calendar
from datetime import date, timedelta
from typing import Optional, Tuple, Union


def parse_iso_date(value: Union[str, date]) -> date:
    """
    Build a date from a ``YYYY-MM-DD`` string's components.

    Any time or offset after the date is ignored. Non-strings pass through.
    """
    if not isinstance(value, str):
        return value
    year, month, day = (int(part) for part in value[:10].split("-"))
    return date(year, month, day)


def shift_month(year: int, month: int, months: int) -> Tuple[int, int]:
    """Move (year, month) by a number of months. month is 1-based."""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def add_months(value: date, months: int, anchor_day: Optional[int] = None) -> date:
    """
    Add calendar months, keeping the day of month where it exists.

    A day past the end of the target month is clamped to its last day
    (Jan 31 + 1 month = Feb 28/29). ``anchor_day`` keeps a series anchored
    on its original day instead of drifting after a clamp.
    """
    year, month = shift_month(value.year, value.month, months)
    day = anchor_day or value.day
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def first_of_month(value: date, months_after: int = 0) -> date:
    """First day of the month ``months_after`` months after ``value``'s month."""
    year, month = shift_month(value.year, value.month, months_after)
    return date(year, month, 1)


def add_weeks(value: date, weeks: int = 1) -> date:
    return value + timedelta(days=7 * weeks)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month, inclusive."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
