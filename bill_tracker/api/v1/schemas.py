"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

BCRYPT_MAX_BYTES = 72


class Credentials(BaseModel):
    """Request body for register and login"""

    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1, max_length=BCRYPT_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        # bcrypt limit is in UTF-8 bytes, not characters
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
        return v


class UserResponse(BaseModel):
    id: str
    email: str


class ProfileResponse(BaseModel):
    """Response for GET /v1/profile/me"""

    id: str
    email: str
    savings: Decimal
    created_at: datetime
    updated_at: datetime


class RecordRequest(BaseModel):
    """Request body for creating or replacing a ledger record"""

    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, allow_inf_nan=False)
    category: str = Field(..., min_length=1)
    occurred_at: Optional[datetime] = None


class RecordResponse(BaseModel):
    id: str
    name: str
    amount: Optional[Decimal]
    category: Optional[str]
    occurred_at: Optional[datetime]


class MessageResponse(BaseModel):
    message: str


class CycleSchema(BaseModel):
    """Active billing cycle"""

    year: int
    month: int
    is_payment_period: bool
    days_remaining: int


class TotalsSchema(BaseModel):
    income: Decimal
    expenses: Decimal
    credit_card: Decimal
    savings_balance: Decimal
    net_balance: Decimal


class FilterSchema(BaseModel):
    period: str
    anchor: Optional[date] = None
    start: Optional[date] = None
    end: Optional[date] = None


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    cycle: CycleSchema
    totals: TotalsSchema
    income_by_category: Dict[str, Decimal]
    expenses_by_category: Dict[str, Decimal]
    credit_card_by_category: Dict[str, Decimal]
    recent_incomes: List[RecordResponse]
    recent_expenses: List[RecordResponse]
    recent_credit_card: List[RecordResponse]
    filter: Optional[FilterSchema] = None
