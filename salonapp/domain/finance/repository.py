"""Finance repository - ledger transaction queries"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, FinancialTransaction


class TransactionRepository:
    """Repository for ledger records. Stages changes; services commit."""

    @staticmethod
    def get_transaction_by_id(db: Session, transaction_id: int, user_id: int) -> Optional[FinancialTransaction]:
        return (
            db.query(FinancialTransaction)
            .filter(FinancialTransaction.id == transaction_id, FinancialTransaction.user_id == user_id)
            .first()
        )

    @staticmethod
    def create_transaction(db: Session, user_id: int, **data) -> FinancialTransaction:
        transaction = FinancialTransaction(user_id=user_id, **data)
        db.add(transaction)
        db.flush()
        return transaction

    @staticmethod
    def get_for_appointment(db: Session, appointment_id: int) -> list[FinancialTransaction]:
        return (
            db.query(FinancialTransaction)
            .filter(FinancialTransaction.appointment_id == appointment_id)
            .order_by(FinancialTransaction.id)
            .all()
        )

    @staticmethod
    def get_children(db: Session, parent_id: int) -> list[FinancialTransaction]:
        """Remainder records split off the given transaction"""
        return (
            db.query(FinancialTransaction)
            .filter(FinancialTransaction.parent_transaction_id == parent_id)
            .order_by(FinancialTransaction.id)
            .all()
        )

    @staticmethod
    def get_transactions(
        db: Session,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        professional_id: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        type: Optional[str] = None,
    ) -> list[FinancialTransaction]:
        query = (
            db.query(FinancialTransaction)
            .options(joinedload(FinancialTransaction.appointment).joinedload(Appointment.professional))
            .filter(FinancialTransaction.user_id == user_id)
        )
        if start is not None:
            query = query.filter(FinancialTransaction.date >= start)
        if end is not None:
            query = query.filter(FinancialTransaction.date <= end)
        if professional_id is not None:
            query = query.join(Appointment, FinancialTransaction.appointment_id == Appointment.id).filter(
                Appointment.professional_id == professional_id
            )
        if status:
            query = query.filter(FinancialTransaction.status == status)
        if search:
            query = query.filter(FinancialTransaction.description.ilike(f"%{search.strip()}%"))
        if type:
            query = query.filter(FinancialTransaction.type == type)
        return query.order_by(FinancialTransaction.date.desc(), FinancialTransaction.id.desc()).all()

    @staticmethod
    def delete_transaction(db: Session, transaction: FinancialTransaction) -> None:
        db.delete(transaction)
        db.flush()
