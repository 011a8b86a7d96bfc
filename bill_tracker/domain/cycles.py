"""Accounting-cycle rules for credit-card billing

A cycle is named after a calendar month but is paid during the first days of
the following month: charges dated on days 1-10 belong to the previous
month's cycle. From day 1 to day 10 the previous cycle is in its payment
period; from day 11 to month end the current month's cycle accumulates.
"""

from datetime import date, timezone
from typing import Iterable, List

from bill_tracker.domain.models import AccountingMonth, Cycle, DatedRecord
from bill_tracker.utils.date_utils import DEFAULT_ACCOUNTING_TZ, previous_month, to_local_date

PAYMENT_CUTOFF_DAY = 10


def classify(day: date, tz: timezone = DEFAULT_ACCOUNTING_TZ) -> AccountingMonth:
    """
    Map a calendar date to the accounting month it is billed in.

    Days 1-10 count toward the previous month (January goes to December of
    the year before); every later day counts toward its own month. Datetimes
    are first converted to their local date in ``tz``.

    Example:
        2024-01-10 -> (2023, 12)
        2024-01-11 -> (2024, 1)
    """
    day = to_local_date(day, tz)

    if day.day <= PAYMENT_CUTOFF_DAY:
        return AccountingMonth(*previous_month(day.year, day.month))
    return AccountingMonth(day.year, day.month)


def current_cycle(now: date, tz: timezone = DEFAULT_ACCOUNTING_TZ) -> Cycle:
    """
    Resolve the active cycle as seen from ``now``.

    During days 1-10 the previous month's cycle is being paid and
    ``days_remaining`` counts down to the cutoff (10 on day 1, 1 on day 10).
    Afterwards the current month accumulates with ``days_remaining`` 0.
    """
    today = to_local_date(now, tz)
    year, month = classify(today)

    if today.day <= PAYMENT_CUTOFF_DAY:
        return Cycle(
            year=year,
            month=month,
            is_payment_period=True,
            days_remaining=PAYMENT_CUTOFF_DAY - today.day + 1,
        )

    return Cycle(year=year, month=month, is_payment_period=False, days_remaining=0)


def belongs_to_cycle(day: date, cycle: Cycle, tz: timezone = DEFAULT_ACCOUNTING_TZ) -> bool:
    """True if ``day`` is billed in ``cycle``"""
    return classify(day, tz) == cycle.accounting_month


def filter_by_cycle(
    records: Iterable[DatedRecord],
    cycle: Cycle,
    tz: timezone = DEFAULT_ACCOUNTING_TZ,
) -> List[DatedRecord]:
    """Records billed in ``cycle``; undated records never match"""
    return [
        r for r in records
        if r.occurred_at is not None and belongs_to_cycle(r.occurred_at, cycle, tz)
    ]
