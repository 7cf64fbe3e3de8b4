"""Calendar month arithmetic used for payoff dates and consistency trends."""

import calendar
from datetime import date


def add_months_keeping_day(dt: date, months: int, day_of_month: int) -> date:
    """Return the date ``months`` after ``dt`` on ``day_of_month``.

    The day is clamped to the last valid day of the target month (a due day of
    31 lands on Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(max(day_of_month, 1), calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_key(dt: date) -> str:
    return f"{dt.year}-{dt.month:02d}"


def month_key_offset(offset: int, anchor: date) -> str:
    """Month key ``offset`` calendar months from ``anchor`` (negative = past)."""
    return month_key(add_months_keeping_day(anchor, offset, 1))
