from datetime import date, datetime
from decimal import Decimal

import pytest

from salonapp.domain.appointments.service import AppointmentService
from salonapp.domain.finance.schemas import ExpenseCreate, ExpenseUpdate, TransactionFilters
from salonapp.domain.finance.service import FinanceService
from salonapp.domain.finance.stats import compute_stats, period_range
from salonapp.exceptions import InvalidTransition, NotFound, ValidationFailed
from salonapp.models import Appointment, FinancialTransaction, Professional


def booked_income(db, owner, catalog, when=datetime(2030, 5, 6, 10, 0), service=None):
    appointment = AppointmentService(db).create_appointment(
        owner, catalog.client.id, catalog.professional.id, (service or catalog.service).id, when
    )
    return (
        db.query(FinancialTransaction)
        .filter(FinancialTransaction.appointment_id == appointment.id)
        .one()
    )


def all_transactions(db):
    return db.query(FinancialTransaction).order_by(FinancialTransaction.id).all()


@pytest.mark.parametrize("paid", ["0.01", "30", "79.99"])
def test_partial_payment_splits_into_fiado(db, owner, catalog, paid):
    income = booked_income(db, owner, catalog)

    paid_record, remainder = FinanceService(db).record_payment(income.id, Decimal(paid), owner)

    assert paid_record.id == income.id
    assert paid_record.status == "paid"
    assert paid_record.amount == Decimal(paid)
    assert remainder.status == "pending"
    assert remainder.amount == Decimal("80.00") - Decimal(paid)
    assert remainder.description == "Restante/Fiado - Corte - Maria Souza"
    assert remainder.date == income.date
    assert remainder.type == "income"
    assert remainder.appointment_id == income.appointment_id
    assert remainder.parent_transaction_id == income.id
    assert sum(t.amount for t in all_transactions(db)) == Decimal("80.00")


def test_full_payment_creates_no_remainder(db, owner, catalog):
    income = booked_income(db, owner, catalog)

    paid_record, remainder = FinanceService(db).record_payment(income.id, Decimal("80.00"), owner)

    assert remainder is None
    assert paid_record.status == "paid"
    assert paid_record.paid_at is not None
    assert len(all_transactions(db)) == 1


@pytest.mark.parametrize("amount", ["0", "-5", "80.01", "abc", None])
def test_invalid_payment_is_rejected_without_changes(db, owner, catalog, amount):
    income = booked_income(db, owner, catalog)

    with pytest.raises(ValidationFailed):
        FinanceService(db).record_payment(income.id, amount, owner)

    db.expire_all()
    (record,) = all_transactions(db)
    assert record.amount == Decimal("80.00")
    assert record.status == "pending"


def test_paid_record_cannot_be_paid_again(db, owner, catalog):
    income = booked_income(db, owner, catalog)
    finance = FinanceService(db)
    finance.record_payment(income.id, Decimal("80"), owner)

    with pytest.raises(InvalidTransition):
        finance.record_payment(income.id, Decimal("10"), owner)


def test_payment_on_another_owners_record_is_not_found(db, owner, other_owner, catalog):
    income = booked_income(db, owner, catalog)
    with pytest.raises(NotFound):
        FinanceService(db).record_payment(income.id, Decimal("10"), other_owner)


def test_revert_merges_pending_remainder(db, owner, catalog):
    income = booked_income(db, owner, catalog)
    finance = FinanceService(db)
    finance.record_payment(income.id, Decimal("30"), owner)

    reverted = finance.revert_payment(income.id, owner)

    assert reverted.status == "pending"
    assert reverted.paid_at is None
    assert reverted.amount == Decimal("80.00")
    (only,) = all_transactions(db)
    assert only.id == income.id


def test_revert_blocked_while_remainder_is_paid(db, owner, catalog):
    income = booked_income(db, owner, catalog)
    finance = FinanceService(db)
    _, remainder = finance.record_payment(income.id, Decimal("30"), owner)
    finance.record_payment(remainder.id, Decimal("50"), owner)

    with pytest.raises(InvalidTransition):
        finance.revert_payment(income.id, owner)

    finance.revert_payment(remainder.id, owner)
    reverted = finance.revert_payment(income.id, owner)
    assert reverted.amount == Decimal("80.00")
    assert len(all_transactions(db)) == 1


def test_only_paid_records_can_be_reverted(db, owner, catalog):
    income = booked_income(db, owner, catalog)
    with pytest.raises(InvalidTransition):
        FinanceService(db).revert_payment(income.id, owner)


def test_expense_lifecycle(db, owner):
    finance = FinanceService(db)
    expense = finance.create_expense(
        ExpenseCreate(description="Aluguel maio", amount=Decimal("1200"), date=date(2030, 5, 5), category="aluguel", status="pending"),
        owner,
    )
    assert expense.type == "expense"
    assert expense.status == "pending"
    assert expense.paid_at is None

    expense = finance.update_expense(expense.id, ExpenseUpdate(amount=Decimal("1250.50")), owner)
    assert expense.amount == Decimal("1250.50")

    expense = finance.mark_expense_paid(expense.id, owner)
    assert expense.status == "paid"
    assert expense.paid_at is not None


def test_expense_defaults_to_paid_other(db, owner):
    expense = FinanceService(db).create_expense(
        ExpenseCreate(description="Café", amount=Decimal("15"), date=date(2030, 5, 5), category=""),
        owner,
    )
    assert expense.status == "paid"
    assert expense.category == "outros"
    assert expense.paid_at is not None


def test_delete_requires_confirmation(db, owner):
    finance = FinanceService(db)
    expense = finance.create_expense(
        ExpenseCreate(description="Luz", amount=Decimal("200"), date=date(2030, 5, 5), category="energia"),
        owner,
    )

    with pytest.raises(ValidationFailed):
        finance.delete_transaction(expense.id, owner)
    assert len(all_transactions(db)) == 1

    finance.delete_transaction(expense.id, owner, confirm=True)
    assert all_transactions(db) == []


def test_appointment_income_cannot_be_deleted(db, owner, catalog):
    income = booked_income(db, owner, catalog)
    with pytest.raises(ValidationFailed):
        FinanceService(db).delete_transaction(income.id, owner, confirm=True)
    assert len(all_transactions(db)) == 1


def test_period_ranges():
    today = date(2030, 3, 15)
    assert period_range("today", today) == (today, today)
    assert period_range("current_month", today) == (date(2030, 3, 1), date(2030, 3, 31))
    assert period_range("last_month", today) == (date(2030, 2, 1), date(2030, 2, 28))
    assert period_range("last_month", date(2030, 1, 10)) == (date(2029, 12, 1), date(2029, 12, 31))
    assert period_range("all", today) == (None, None)


def test_commission_uses_professional_rate():
    with_rate = FinancialTransaction(
        amount=Decimal("100"),
        type="income",
        status="paid",
        appointment=Appointment(professional=Professional(name="Carla", commission_rate=Decimal("50"))),
    )
    without_rate = FinancialTransaction(
        amount=Decimal("200"),
        type="income",
        status="pending",
        appointment=Appointment(professional=Professional(name="Bruno", commission_rate=None)),
    )

    stats = compute_stats([with_rate, without_rate])

    assert stats["commission"] == Decimal("50.00")
    assert stats["total_income"] == Decimal("300.00")
    assert stats["received"] == Decimal("100.00")
    assert stats["pending"] == Decimal("200.00")


def test_stats_for_period(db, owner, catalog):
    finance = FinanceService(db)
    income = booked_income(db, owner, catalog)
    finance.record_payment(income.id, Decimal("30"), owner)
    booked_income(db, owner, catalog, when=datetime(2030, 4, 20, 9, 0))
    finance.create_expense(
        ExpenseCreate(description="Produtos", amount=Decimal("40"), date=date(2030, 5, 2), category="produtos"),
        owner,
    )
    cancelled = booked_income(db, owner, catalog, when=datetime(2030, 5, 9, 9, 0))
    AppointmentService(db).cancel_appointment(cancelled.appointment_id, owner, confirm=True)

    stats = finance.get_stats(owner, "current_month", today=date(2030, 5, 15))

    assert stats["total_income"] == Decimal("160.00")
    assert stats["received"] == Decimal("30.00")
    assert stats["pending"] == Decimal("50.00")
    assert stats["total_expense"] == Decimal("40.00")
    assert stats["balance"] == Decimal("120.00")
    assert stats["commission"] == Decimal("80.00")
    assert stats["count"] == 4

    last_month = finance.get_stats(owner, "last_month", today=date(2030, 5, 15))
    assert last_month["total_income"] == Decimal("80.00")
    assert last_month["count"] == 1


def test_professional_filter(db, owner, catalog):
    finance = FinanceService(db)
    booked_income(db, owner, catalog)
    AppointmentService(db).create_appointment(
        owner, catalog.client.id, catalog.other_professional.id, catalog.long_service.id, datetime(2030, 5, 6, 11, 0)
    )

    carla = finance.get_stats(owner, "all", professional_id=catalog.professional.id)
    bruno = finance.get_stats(owner, "all", professional_id=catalog.other_professional.id)

    assert carla["total_income"] == Decimal("80.00")
    assert bruno["total_income"] == Decimal("150.00")
    assert bruno["commission"] == Decimal("0.00")


def test_list_filters(db, owner, catalog):
    finance = FinanceService(db)
    income = booked_income(db, owner, catalog)
    finance.record_payment(income.id, Decimal("30"), owner)
    finance.create_expense(
        ExpenseCreate(description="Produtos", amount=Decimal("40"), date=date(2030, 5, 2), category="produtos"),
        owner,
    )
    today = date(2030, 5, 15)

    everything = finance.get_transactions(owner, TransactionFilters(), today=today)
    pending = finance.get_transactions(owner, TransactionFilters(status="pending"), today=today)
    fiado = finance.get_transactions(owner, TransactionFilters(search="fiado"), today=today)
    expenses = finance.get_transactions(owner, TransactionFilters(type="expense"), today=today)

    assert len(everything) == 3
    assert everything[-1].description == "Produtos"
    assert [t.amount for t in pending] == [Decimal("50.00")]
    assert len(fiado) == 1
    assert [t.description for t in expenses] == ["Produtos"]
