"""Data access layer for users and ledger records"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Type

from sqlalchemy.orm import Session

from bill_tracker.domain.exceptions import RecordNotFoundError
from bill_tracker.domain.models import DatedRecord, RecordKind
from bill_tracker.infrastructure.database.models import CreditCardCharge, Expense, Income, RecordMixin, User

RECORD_MODELS: Dict[RecordKind, Type[RecordMixin]] = {
    RecordKind.INCOME: Income,
    RecordKind.EXPENSE: Expense,
    RecordKind.CREDIT_CARD: CreditCardCharge,
}


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored and returned as UTC; naive values are already UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UserRepository:
    """Repository for user accounts"""

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, email: str, password_hash: str) -> User:
        """Persist a new account"""
        user = User(email=email, password_hash=password_hash, savings=Decimal("0"))
        self.db.add(user)
        self.db.flush()  # Get ID without committing
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()


class RecordRepository:
    """Repository for one ledger (incomes, expenses or credit-card charges)

    Every query is scoped to ``user_id``; a record owned by someone else is
    reported exactly like a missing one.
    """

    def __init__(self, db: Session, kind: RecordKind):
        self.db = db
        self.kind = kind
        self.model = RECORD_MODELS[kind]

    def create_record(
        self,
        user_id: str,
        name: str,
        amount: Decimal,
        category: Optional[str],
        occurred_at: Optional[datetime],
    ) -> RecordMixin:
        """Insert a record for ``user_id``"""
        record = self.model(
            user_id=user_id,
            name=name,
            amount=amount,
            category=category,
            occurred_at=_as_utc(occurred_at),
        )
        self.db.add(record)
        self.db.flush()
        return record

    def list_for_user(self, user_id: str) -> List[RecordMixin]:
        """All records of a user, newest first"""
        return (
            self.db.query(self.model)
            .filter(self.model.user_id == user_id)
            .order_by(self.model.occurred_at.desc(), self.model.created_at.desc())
            .all()
        )

    def get_for_user(self, record_id: str, user_id: str) -> RecordMixin:
        """
        Raises:
            RecordNotFoundError: If no record with this ID belongs to the user
        """
        record = (
            self.db.query(self.model)
            .filter(self.model.id == record_id, self.model.user_id == user_id)
            .first()
        )
        if record is None:
            raise RecordNotFoundError(f"{self.kind.value} {record_id} not found")
        return record

    def update_record(
        self,
        record_id: str,
        user_id: str,
        name: str,
        amount: Decimal,
        category: Optional[str],
        occurred_at: Optional[datetime] = None,
    ) -> RecordMixin:
        """Replace name, amount and category; the date only changes when given"""
        record = self.get_for_user(record_id, user_id)
        record.name = name
        record.amount = amount
        record.category = category
        if occurred_at is not None:
            record.occurred_at = _as_utc(occurred_at)
        self.db.flush()
        return record

    def delete_record(self, record_id: str, user_id: str) -> None:
        record = self.get_for_user(record_id, user_id)
        self.db.delete(record)
        self.db.flush()

    @staticmethod
    def to_domain(record: RecordMixin) -> DatedRecord:
        """Convert an ORM row to the domain record used by aggregation"""
        return DatedRecord(
            id=record.id,
            name=record.name,
            amount=Decimal(str(record.amount)) if record.amount is not None else None,
            category=record.category,
            occurred_at=_as_utc(record.occurred_at),
        )
