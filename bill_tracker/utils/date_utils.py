"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Tuple

from bill_tracker.domain.exceptions import InvalidDateError

# Accounting dates are computed at a fixed UTC-5 offset, never the host timezone
DEFAULT_ACCOUNTING_TZ = timezone(timedelta(hours=-5))


def to_local_date(value: date, tz: timezone = DEFAULT_ACCOUNTING_TZ) -> date:
    """
    Normalize a timestamp to its calendar date in the accounting timezone.

    - aware datetimes are converted to ``tz``
    - naive datetimes are treated as UTC (how they are stored)
    - plain dates are assumed to be local already and pass through

    Raises:
        InvalidDateError: If value is not a date or datetime
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(tz).date()
    if isinstance(value, date):
        return value
    raise InvalidDateError(f"Expected a date or datetime, got {type(value).__name__}")


def previous_month(year: int, month: int) -> Tuple[int, int]:
    """Return (year, month) of the month before, rolling January back to December"""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday..Sunday week containing ``day`` (inclusive)"""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month (inclusive)"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
