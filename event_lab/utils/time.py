"""
Calendar utilities for daily market data.

All dates handled by the analysis layer are naive ``datetime.date`` values
representing the trading session. Trading-day arithmetic is done with series
indices; these helpers only cover calendar-level conversions.
"""

import calendar
import re
from collections.abc import Container
from datetime import date, datetime, timedelta
from typing import Any, Optional

MONTH_DAY_PATTERN = re.compile(r"^\d{1,2}-\d{1,2}$")

WEEKDAY_NAMES = (
    "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"
)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def to_date(value: Any) -> date:
    """
    Coerce a date-like value to ``datetime.date``.

    Args:
        value: date, datetime, or ISO-8601 string (date part is used)

    Returns:
        Session date

    Raises:
        ValueError: If the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            text = text.split("T", 1)[0]
        return date.fromisoformat(text[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def format_date(value: date) -> str:
    """Format a session date as YYYY-MM-DD."""
    return value.isoformat()


def parse_month_day(value: str) -> tuple[int, int]:
    """
    Parse an ``MM-DD`` string.

    Raises:
        ValueError: If the string does not match the pattern
    """
    if not isinstance(value, str) or not MONTH_DAY_PATTERN.match(value):
        raise ValueError(f"Expected MM-DD format, got {value!r}")
    month, day = value.split("-")
    return int(month), int(day)


def resolve_calendar_date(year: int, month: int, day: int) -> date:
    """
    Build a calendar date, rolling day overflow into the following month.

    ``resolve_calendar_date(2021, 2, 30)`` is 2021-03-02.
    """
    return date(year, month, 1) + timedelta(days=day - 1)


def snap_to_trading_day(
    target: date,
    trading_days: Container[date],
    max_search_days: int = 10
) -> Optional[date]:
    """
    Find the trading session on or after a calendar date.

    Args:
        target: Nominal calendar date
        trading_days: Container of session dates (dict or set for O(1) lookups)
        max_search_days: Calendar days to search forward after the target

    Returns:
        The target itself when it is a session, else the first session found
        within the window, else None
    """
    if target in trading_days:
        return target

    for offset in range(1, max_search_days + 1):
        candidate = target + timedelta(days=offset)
        if candidate in trading_days:
            return candidate

    return None


def third_friday(year: int, month: int) -> date:
    """Date of the third Friday of a month (monthly options expiration)."""
    first_weekday = calendar.weekday(year, month, 1)
    first_friday = 1 + (calendar.FRIDAY - first_weekday) % 7
    return date(year, month, first_friday + 14)


def calendar_days_between(start: date, end: date) -> int:
    """Signed number of calendar days from start to end."""
    return (end - start).days


def weekday_name(value: date) -> str:
    """Upper-case English weekday name of a date."""
    return WEEKDAY_NAMES[value.weekday()]
