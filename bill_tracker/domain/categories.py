"""Category labels offered for each ledger"""

from typing import Tuple

from bill_tracker.domain.models import RecordKind

OTHER = "Other"

EXPENSE_CATEGORIES: Tuple[str, ...] = (
    "Bank",
    "Fuel",
    "Fees",
    "Family",
    OTHER,
    "AI",
    "Food",
    "Leisure",
)

INCOME_CATEGORIES: Tuple[str, ...] = (
    "Allowance",
    "Chores",
    "Development",
    "Taxi",
    OTHER,
)


def categories_for(kind: RecordKind) -> Tuple[str, ...]:
    """Credit-card charges share the expense labels"""
    if kind == RecordKind.INCOME:
        return INCOME_CATEGORIES
    return EXPENSE_CATEGORIES
