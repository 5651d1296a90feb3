"""Finance router - ledger, payments, expenses and statistics"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user_with_subscription
from ...database import get_db
from ...models import User
from .schemas import (
    EXPENSE_CATEGORIES,
    ExpenseCreate,
    ExpenseUpdate,
    FinancialStats,
    PaymentRequest,
    PaymentResponse,
    Period,
    TransactionFilters,
    TransactionResponse,
)
from .service import FinanceService

router = APIRouter(prefix="/finance", tags=["Finance"])


def get_finance_service(db: Session = Depends(get_db)) -> FinanceService:
    """Dependency injection for FinanceService"""
    return FinanceService(db)


@router.get("/transactions", response_model=list[TransactionResponse])
async def get_transactions(
    filters: TransactionFilters = Depends(),
    current_user: User = Depends(get_current_user_with_subscription),
    service: FinanceService = Depends(get_finance_service),
):
    """Ledger records for a period, newest first"""
    return service.get_transactions(current_user, filters)


@router.get("/stats", response_model=FinancialStats)
async def get_stats(
    period: Period = Query("current_month"),
    professional_id: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user_with_subscription),
    service: FinanceService = Depends(get_finance_service),
):
    return service.get_stats(current_user, period, professional_id)


@router.get("/categories", response_model=list[str])
async def get_categories(current_user: User = Depends(get_current_user_with_subscription)):
    """Suggested expense categories"""
    return EXPENSE_CATEGORIES


@router.post("/transactions/{transaction_id}/payments", response_model=PaymentResponse)
async def record_payment(
    transaction_id: int,
    data: PaymentRequest,
    current_user: User = Depends(get_current_user_with_subscription),
    service: FinanceService = Depends(get_finance_service),
):
    """Register a full or partial payment; a partial one leaves a fiado remainder"""
    paid, remainder = service.record_payment(transaction_id, data.amount_paid, current_user)
    return PaymentResponse(
        paid=TransactionResponse.model_validate(paid),
        remainder=TransactionResponse.model_validate(remainder) if remainder else None,
    )


@router.post("/transactions/{transaction_id}/revert", response_model=TransactionResponse)
async def revert_payment(
    transaction_id: int,
    current_user: User = Depends(get_current_user_with_subscription),
    service: FinanceService = Depends(get_finance_service),
):
    return service.revert_payment(transaction_id, current_user)


@router.delete("/transactions/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    confirm: bool = Query(False),
    current_user: User = Depends(get_current_user_with_subscription),
    service: FinanceService = Depends(get_finance_service),
):
    return service.delete_transaction(transaction_id, current_user, confirm)


@router.post("/expenses", response_model=TransactionResponse, status_code=201)
async def create_expense(
    data: ExpenseCreate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: FinanceService = Depends(get_finance_service),
):
    return service.create_expense(data, current_user)


@router.patch("/expenses/{transaction_id}", response_model=TransactionResponse)
async def update_expense(
    transaction_id: int,
    data: ExpenseUpdate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: FinanceService = Depends(get_finance_service),
):
    return service.update_expense(transaction_id, data, current_user)


@router.post("/expenses/{transaction_id}/pay", response_model=TransactionResponse)
async def mark_expense_paid(
    transaction_id: int,
    current_user: User = Depends(get_current_user_with_subscription),
    service: FinanceService = Depends(get_finance_service),
):
    return service.mark_expense_paid(transaction_id, current_user)
