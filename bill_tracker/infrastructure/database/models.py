"""SQLAlchemy ORM models for users and their ledgers"""

import uuid
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Text
from sqlalchemy.orm import declarative_base, declared_attr, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Account owning incomes, expenses and credit-card charges"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    savings = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    incomes = relationship("Income", back_populates="user", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="user", cascade="all, delete-orphan")
    credit_card_charges = relationship("CreditCardCharge", back_populates="user", cascade="all, delete-orphan")


class RecordMixin:
    """Columns shared by every ledger table"""

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(Text, nullable=True)
    occurred_at = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    @declared_attr
    def user_id(cls):
        return Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class Income(RecordMixin, Base):
    """Money received"""

    __tablename__ = "incomes"

    user = relationship("User", back_populates="incomes")


class Expense(RecordMixin, Base):
    """Money spent from savings"""

    __tablename__ = "expenses"

    user = relationship("User", back_populates="expenses")


class CreditCardCharge(RecordMixin, Base):
    """Charge billed to the credit card, paid per accounting cycle"""

    __tablename__ = "credit_card_charges"

    user = relationship("User", back_populates="credit_card_charges")
