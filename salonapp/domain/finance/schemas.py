"""Finance schemas - ledger transactions, payments and expenses"""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

# Suggested expense categories; free-form values are accepted too
EXPENSE_CATEGORIES = [
    "aluguel",
    "produtos",
    "energia",
    "marketing",
    "equipamentos",
    "impostos",
    "salarios",
    "outros",
]

Period = Literal["today", "current_month", "last_month", "all"]


def _required_description(v):
    if v is None or not v.strip():
        raise ValueError("Description is required")
    return v.strip()


class PaymentRequest(BaseModel):
    amount_paid: Decimal


class ExpenseCreate(BaseModel):
    description: str
    amount: Decimal = Field(..., ge=0)
    date: date_type
    category: str = "outros"
    status: Literal["pending", "paid"] = "paid"

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _required_description(v)

    @field_validator("category")
    @classmethod
    def default_category(cls, v):
        return (v or "").strip() or "outros"


class ExpenseUpdate(BaseModel):
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    date: Optional[date_type] = None
    category: Optional[str] = None
    status: Optional[Literal["pending", "paid"]] = None

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _required_description(v)


class TransactionFilters(BaseModel):
    period: Period = "current_month"
    status: Literal["all", "pending", "paid", "cancelled"] = "all"
    professional_id: Optional[int] = None
    search: Optional[str] = None
    type: Optional[Literal["income", "expense"]] = None


class TransactionResponse(BaseModel):
    id: int
    appointment_id: Optional[int] = None
    parent_transaction_id: Optional[int] = None
    description: str
    amount: float
    type: str
    status: str
    date: date_type
    category: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentResponse(BaseModel):
    paid: TransactionResponse
    remainder: Optional[TransactionResponse] = None


class FinancialStats(BaseModel):
    total_income: float
    received: float
    pending: float
    total_expense: float
    balance: float
    commission: float
    count: int
