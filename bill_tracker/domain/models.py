"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from bill_tracker.domain.exceptions import InvalidAmountError, InvalidDateError


class RecordKind(str, Enum):
    """Which ledger a record lives in"""

    INCOME = "income"
    EXPENSE = "expense"
    CREDIT_CARD = "credit_card"


class FilterKind(str, Enum):
    """Date filters available on the dashboard"""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"  # calendar month
    CYCLE = "cycle"  # accounting cycle, see domain.cycles
    YEAR = "year"
    RANGE = "range"


@dataclass
class DatedRecord:
    """Income, expense or credit-card charge"""

    id: str
    name: str
    amount: Optional[Decimal]
    category: Optional[str]
    occurred_at: Optional[datetime]

    def __post_init__(self) -> None:
        if self.amount is not None:
            if not isinstance(self.amount, Decimal):
                try:
                    self.amount = Decimal(str(self.amount))
                except ArithmeticError as e:
                    raise InvalidAmountError(f"Amount {self.amount!r} is not a number") from e
            if not self.amount.is_finite():
                raise InvalidAmountError(f"Amount must be finite, got {self.amount}")
            if self.amount < 0:
                raise InvalidAmountError(f"Amount must be non-negative, got {self.amount}")

        if self.occurred_at is not None and not isinstance(self.occurred_at, date):
            raise InvalidDateError(f"occurred_at must be a datetime, got {self.occurred_at!r}")


class AccountingMonth(NamedTuple):
    """Billing cycle a date is charged to"""

    year: int
    month: int


@dataclass(frozen=True)
class Cycle:
    """Active billing cycle as seen from a given day"""

    year: int
    month: int
    is_payment_period: bool
    days_remaining: int

    @property
    def accounting_month(self) -> AccountingMonth:
        return AccountingMonth(self.year, self.month)


@dataclass(frozen=True)
class DateFilter:
    """Criteria for filter_by_date_range"""

    kind: FilterKind
    anchor: Optional[date] = None
    start: Optional[date] = None
    end: Optional[date] = None


@dataclass
class Dashboard:
    """Aggregated view of a user's ledgers"""

    cycle: Cycle
    total_income: Decimal
    total_expenses: Decimal
    credit_card_total: Decimal
    savings_balance: Decimal
    net_balance: Decimal
    income_by_category: Dict[str, Decimal]
    expenses_by_category: Dict[str, Decimal]
    credit_card_by_category: Dict[str, Decimal]
    recent_incomes: List[DatedRecord] = field(default_factory=list)
    recent_expenses: List[DatedRecord] = field(default_factory=list)
    recent_credit_card: List[DatedRecord] = field(default_factory=list)
    criteria: Optional[DateFilter] = None
