"""Aggregation pipeline - totals, category breakdowns and date filters"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from bill_tracker.domain.categories import EXPENSE_CATEGORIES, INCOME_CATEGORIES, OTHER
from bill_tracker.domain.cycles import classify, current_cycle, filter_by_cycle
from bill_tracker.domain.exceptions import InvalidFilterError
from bill_tracker.domain.models import Dashboard, DatedRecord, DateFilter, FilterKind
from bill_tracker.utils.date_utils import DEFAULT_ACCOUNTING_TZ, month_bounds, to_local_date, week_bounds

ZERO = Decimal("0")


def total_amount(records: Iterable[DatedRecord]) -> Decimal:
    """Sum of all amounts, missing amounts count as zero"""
    return sum((r.amount for r in records if r.amount is not None), ZERO)


def aggregate_by_category(
    records: Iterable[DatedRecord],
    categories: Sequence[str],
    other_label: str = OTHER,
) -> Dict[str, Decimal]:
    """
    Total amounts per category.

    Every label in ``categories`` gets a key (zero when unused), followed by
    ``other_label`` if it is not already one of them. Records with a missing
    or unknown category are folded into ``other_label``, so the values always
    add up to total_amount(records).
    """
    totals: Dict[str, Decimal] = {label: ZERO for label in categories}
    totals.setdefault(other_label, ZERO)

    for record in records:
        label = record.category if record.category in totals else other_label
        if record.amount is not None:
            totals[label] += record.amount

    return totals


def _filter_bounds(criteria: DateFilter, tz: timezone) -> Tuple[date, date]:
    """Inclusive [start, end] for every filter kind except CYCLE"""
    if criteria.kind == FilterKind.RANGE:
        if criteria.start is None or criteria.end is None:
            raise InvalidFilterError("Range filter requires both start and end")
        start, end = to_local_date(criteria.start, tz), to_local_date(criteria.end, tz)
        if start > end:
            raise InvalidFilterError(f"Range start {start} is after end {end}")
        return start, end

    if criteria.anchor is None:
        raise InvalidFilterError(f"{criteria.kind.value} filter requires an anchor date")

    anchor = to_local_date(criteria.anchor, tz)
    if criteria.kind == FilterKind.DAY:
        return anchor, anchor
    if criteria.kind == FilterKind.WEEK:
        return week_bounds(anchor)
    if criteria.kind == FilterKind.MONTH:
        return month_bounds(anchor.year, anchor.month)
    if criteria.kind == FilterKind.YEAR:
        return date(anchor.year, 1, 1), date(anchor.year, 12, 31)

    raise InvalidFilterError(f"Unsupported filter kind: {criteria.kind}")


def filter_by_date_range(
    records: Iterable[DatedRecord],
    criteria: DateFilter,
    tz: timezone = DEFAULT_ACCOUNTING_TZ,
) -> List[DatedRecord]:
    """
    Keep records whose local date matches ``criteria``.

    MONTH is the calendar month of the anchor; CYCLE is the accounting cycle
    the anchor is billed in (days 1-10 roll back a month). Undated records are
    dropped by every filter. Order is preserved, so filtering is idempotent.
    """
    records = list(records)

    if criteria.kind == FilterKind.CYCLE:
        if criteria.anchor is None:
            raise InvalidFilterError("cycle filter requires an anchor date")
        target = classify(criteria.anchor, tz)
        return [
            r for r in records
            if r.occurred_at is not None and classify(r.occurred_at, tz) == target
        ]

    start, end = _filter_bounds(criteria, tz)
    return [
        r for r in records
        if r.occurred_at is not None and start <= to_local_date(r.occurred_at, tz) <= end
    ]


def most_recent(records: Iterable[DatedRecord], limit: int) -> List[DatedRecord]:
    """Newest first, undated records last"""
    records = list(records)
    dated = [r for r in records if r.occurred_at is not None]
    undated = [r for r in records if r.occurred_at is None]
    dated.sort(key=lambda r: _sort_key(r.occurred_at), reverse=True)
    return (dated + undated)[:limit]


def _sort_key(value: date) -> datetime:
    # Naive values are stored as UTC; make everything comparable
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def build_dashboard(
    incomes: Iterable[DatedRecord],
    expenses: Iterable[DatedRecord],
    card_charges: Iterable[DatedRecord],
    now: datetime,
    tz: timezone = DEFAULT_ACCOUNTING_TZ,
    criteria: Optional[DateFilter] = None,
    recent_limit: int = 5,
) -> Dashboard:
    """
    Compose the dashboard numbers.

    - incomes and expenses are optionally narrowed by ``criteria``
    - credit-card charges always use the active cycle: the amount due during
      the payment period, the amount accumulating otherwise
    - savings = income - expenses; net = savings - credit card
    """
    incomes = list(incomes)
    expenses = list(expenses)
    card_charges = list(card_charges)

    cycle = current_cycle(now, tz)

    if criteria is not None:
        incomes = filter_by_date_range(incomes, criteria, tz)
        expenses = filter_by_date_range(expenses, criteria, tz)

    cycle_charges = filter_by_cycle(card_charges, cycle, tz)

    total_income = total_amount(incomes)
    total_expenses = total_amount(expenses)
    credit_card_total = total_amount(cycle_charges)
    savings_balance = total_income - total_expenses

    return Dashboard(
        cycle=cycle,
        total_income=total_income,
        total_expenses=total_expenses,
        credit_card_total=credit_card_total,
        savings_balance=savings_balance,
        net_balance=savings_balance - credit_card_total,
        income_by_category=aggregate_by_category(incomes, INCOME_CATEGORIES),
        expenses_by_category=aggregate_by_category(expenses, EXPENSE_CATEGORIES),
        credit_card_by_category=aggregate_by_category(cycle_charges, EXPENSE_CATEGORIES),
        recent_incomes=most_recent(incomes, recent_limit),
        recent_expenses=most_recent(expenses, recent_limit),
        recent_credit_card=most_recent(card_charges, recent_limit),
        criteria=criteria,
    )
