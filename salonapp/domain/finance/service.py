"""Finance service - ledger side effects, payments, expenses and statistics"""

import logging
from datetime import date, datetime
from decimal import InvalidOperation
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import InvalidTransition, NotFound, ValidationFailed
from ...models import Appointment, FinancialTransaction, User
from .repository import TransactionRepository
from .schemas import ExpenseCreate, ExpenseUpdate, TransactionFilters
from .stats import compute_stats, period_range, to_money

logger = logging.getLogger(__name__)

REMAINDER_PREFIX = "Restante/Fiado - "


class FinanceService:
    """
    Ledger side-effect engine.

    The stage_* methods are called by the appointment lifecycle inside its
    own unit of work and never commit. Every other public method is one
    operation: a single commit, rolled back on failure.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = TransactionRepository()

    # ------------------------------------------------------------------
    # Appointment side effects
    # ------------------------------------------------------------------

    def stage_booking_income(self, user: User, appointment: Appointment) -> FinancialTransaction:
        """Pending income for a new appointment, priced at booking time"""
        return self.repo.create_transaction(
            self.db,
            user.id,
            appointment_id=appointment.id,
            description=f"{appointment.service.name} - {appointment.client.name}",
            amount=to_money(appointment.service.price),
            type="income",
            status="pending",
            date=appointment.date.date(),
        )

    def stage_appointment_paid(self, appointment: Appointment, now: datetime) -> int:
        """Mark every non-cancelled linked record paid; returns how many changed"""
        changed = 0
        for transaction in self.repo.get_for_appointment(self.db, appointment.id):
            if transaction.status == "cancelled":
                continue
            if transaction.status != "paid":
                transaction.status = "paid"
                transaction.paid_at = now
                changed += 1
        self.db.flush()
        return changed

    def stage_appointment_cancelled(self, appointment: Appointment) -> int:
        transactions = self.repo.get_for_appointment(self.db, appointment.id)
        for transaction in transactions:
            transaction.status = "cancelled"
        self.db.flush()
        return len(transactions)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def get_transaction(self, transaction_id: int, user: User) -> FinancialTransaction:
        transaction = self.repo.get_transaction_by_id(self.db, transaction_id, user.id)
        if not transaction:
            raise NotFound("Transaction not found")
        return transaction

    def record_payment(
        self, transaction_id: int, amount_paid, user: User, now: Optional[datetime] = None
    ) -> tuple[FinancialTransaction, Optional[FinancialTransaction]]:
        """
        Register a full or partial payment.

        A partial payment turns the record into the paid portion and splits
        the rest off into a pending "fiado" record with the same date, so the
        two amounts still add up to the original.
        """
        transaction = self.get_transaction(transaction_id, user)

        try:
            paid = to_money(amount_paid)
        except (InvalidOperation, TypeError, ValueError) as e:
            raise ValidationFailed("Payment amount must be a number") from e

        original = to_money(transaction.amount)
        if paid <= 0:
            logger.warning(f"⚠️ Rejected payment of {paid} for transaction {transaction.id}")
            raise ValidationFailed("Payment amount must be greater than zero")
        if paid > original:
            logger.warning(f"⚠️ Rejected payment of {paid} above original {original} (transaction {transaction.id})")
            raise ValidationFailed(f"Payment amount cannot exceed the original amount ({original})")
        if transaction.status != "pending":
            raise InvalidTransition(f"Only pending transactions can be paid (current status: {transaction.status})")

        now = now or datetime.utcnow()
        remainder = None
        try:
            transaction.amount = paid
            transaction.status = "paid"
            transaction.paid_at = now
            if paid < original:
                remainder = self.repo.create_transaction(
                    self.db,
                    user.id,
                    appointment_id=transaction.appointment_id,
                    parent_transaction_id=transaction.id,
                    description=REMAINDER_PREFIX + transaction.description,
                    amount=original - paid,
                    type=transaction.type,
                    status="pending",
                    date=transaction.date,
                    category=transaction.category,
                )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to record payment for transaction {transaction_id}: {e}")
            raise

        self.db.refresh(transaction)
        if remainder is not None:
            self.db.refresh(remainder)
            logger.info(
                f"✅ Partial payment of {paid} on transaction {transaction.id}; "
                f"{remainder.amount} left as fiado (transaction {remainder.id})"
            )
        else:
            logger.info(f"✅ Transaction {transaction.id} paid in full ({paid})")
        return transaction, remainder

    def revert_payment(self, transaction_id: int, user: User) -> FinancialTransaction:
        """
        Put a paid record back to pending.

        Pending remainders split off this record are folded back into it so
        the debt is counted once. Refused while any remainder is paid or
        cancelled.
        """
        transaction = self.get_transaction(transaction_id, user)
        if transaction.status != "paid":
            raise InvalidTransition(f"Only paid transactions can be reverted (current status: {transaction.status})")

        children = self.repo.get_children(self.db, transaction.id)
        settled = [c for c in children if c.status != "pending"]
        if settled:
            raise InvalidTransition(
                "This payment has a remainder that is already "
                f"{settled[0].status} (transaction {settled[0].id}); revert that first"
            )

        try:
            total = to_money(transaction.amount)
            for child in children:
                total += to_money(child.amount)
                self.repo.delete_transaction(self.db, child)
            transaction.amount = total
            transaction.status = "pending"
            transaction.paid_at = None
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to revert transaction {transaction_id}: {e}")
            raise

        self.db.refresh(transaction)
        logger.info(
            f"↩️ Transaction {transaction.id} reverted to pending"
            + (f", merged {len(children)} remainder(s)" if children else "")
        )
        return transaction

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def create_expense(self, data: ExpenseCreate, user: User, now: Optional[datetime] = None) -> FinancialTransaction:
        expense = self.repo.create_transaction(
            self.db,
            user.id,
            description=data.description,
            amount=to_money(data.amount),
            type="expense",
            status=data.status,
            date=data.date,
            category=data.category,
            paid_at=(now or datetime.utcnow()) if data.status == "paid" else None,
        )
        self.db.commit()
        self.db.refresh(expense)
        logger.info(f"✅ Expense created: {expense.description} ({expense.amount}, {expense.status})")
        return expense

    def _get_expense(self, transaction_id: int, user: User) -> FinancialTransaction:
        transaction = self.get_transaction(transaction_id, user)
        if transaction.type != "expense" or transaction.appointment_id is not None:
            raise ValidationFailed("Only standalone expenses can be edited here")
        return transaction

    def update_expense(self, transaction_id: int, data: ExpenseUpdate, user: User, now: Optional[datetime] = None) -> FinancialTransaction:
        expense = self._get_expense(transaction_id, user)
        updates = data.model_dump(exclude_unset=True)
        if "amount" in updates and updates["amount"] is not None:
            updates["amount"] = to_money(updates["amount"])
        if updates.get("category") is not None:
            updates["category"] = updates["category"].strip() or "outros"
        for key, value in updates.items():
            if value is not None:
                setattr(expense, key, value)
        if "status" in updates:
            expense.paid_at = (expense.paid_at or now or datetime.utcnow()) if expense.status == "paid" else None
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def mark_expense_paid(self, transaction_id: int, user: User, now: Optional[datetime] = None) -> FinancialTransaction:
        expense = self._get_expense(transaction_id, user)
        expense.status = "paid"
        expense.paid_at = now or datetime.utcnow()
        self.db.commit()
        self.db.refresh(expense)
        logger.info(f"✅ Expense {expense.id} marked as paid")
        return expense

    def delete_transaction(self, transaction_id: int, user: User, confirm: bool = False) -> dict:
        """Hard delete of a standalone record. Irreversible."""
        if not confirm:
            raise ValidationFailed("Deleting a transaction is irreversible; confirm to proceed")
        transaction = self.get_transaction(transaction_id, user)
        if transaction.appointment_id is not None:
            raise ValidationFailed("Transactions linked to an appointment cannot be deleted; cancel the appointment instead")

        self.repo.delete_transaction(self.db, transaction)
        self.db.commit()
        logger.info(f"🗑️ Transaction {transaction_id} deleted by user {user.id}")
        return {"message": "Transaction deleted"}

    # ------------------------------------------------------------------
    # Listing and statistics
    # ------------------------------------------------------------------

    def get_transactions(self, user: User, filters: TransactionFilters, today: Optional[date] = None) -> list[FinancialTransaction]:
        start, end = period_range(filters.period, today or date.today())
        return self.repo.get_transactions(
            self.db,
            user.id,
            start=start,
            end=end,
            professional_id=filters.professional_id,
            status=None if filters.status == "all" else filters.status,
            search=filters.search,
            type=filters.type,
        )

    def get_stats(self, user: User, period: str = "current_month", professional_id: Optional[int] = None, today: Optional[date] = None) -> dict:
        """Totals for a period; status and search filters do not apply"""
        start, end = period_range(period, today or date.today())
        transactions = self.repo.get_transactions(
            self.db, user.id, start=start, end=end, professional_id=professional_id
        )
        return compute_stats(transactions)