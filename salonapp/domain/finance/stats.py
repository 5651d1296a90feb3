"""
Ledger aggregates.

Pure folds over a filtered set of transactions; nothing here is stored.
"""

from calendar import monthrange
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ...models import FinancialTransaction

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)


def period_range(period: str, today: date) -> tuple[Optional[date], Optional[date]]:
    """Inclusive (start, end) accounting dates for a period filter; (None, None) for all"""
    if period == "today":
        return today, today
    if period == "current_month":
        start = today.replace(day=1)
        return start, today.replace(day=monthrange(today.year, today.month)[1])
    if period == "last_month":
        end = today.replace(day=1) - timedelta(days=1)
        return end.replace(day=1), end
    return None, None


def commission_rate_of(transaction: FinancialTransaction) -> Decimal:
    """Rate of the professional who performed the linked appointment, 0 when absent"""
    appointment = transaction.appointment
    if appointment is None or appointment.professional is None:
        return Decimal("0")
    rate = appointment.professional.commission_rate
    return Decimal(str(rate)) if rate is not None else Decimal("0")


def compute_stats(transactions: Iterable[FinancialTransaction]) -> dict:
    total_income = Decimal("0")
    received = Decimal("0")
    pending = Decimal("0")
    total_expense = Decimal("0")
    commission = Decimal("0")
    count = 0

    for t in transactions:
        count += 1
        amount = Decimal(str(t.amount))
        if t.type == "income":
            total_income += amount
            if t.status == "paid":
                received += amount
            elif t.status == "pending":
                pending += amount
            commission += amount * commission_rate_of(t) / 100
        elif t.type == "expense":
            total_expense += amount

    return {
        "total_income": to_money(total_income),
        "received": to_money(received),
        "pending": to_money(pending),
        "total_expense": to_money(total_expense),
        "balance": to_money(total_income - total_expense),
        "commission": to_money(commission),
        "count": count,
    }
