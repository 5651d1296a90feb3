"""Dashboard service - headline numbers for the operator's home screen"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client, FinancialTransaction, User
from ..appointments.repository import AppointmentRepository
from ..appointments.schemas import AppointmentResponse
from ..appointments.service import view_range
from ..catalog.repository import ProfessionalRepository, ServiceRepository
from ..clients.repository import ClientRepository
from ..clients.schemas import ClientResponse
from ..finance.stats import period_range, to_money

# Bookable slots per professional per day used for the occupation rate
SLOTS_PER_PROFESSIONAL = 12


def occupation_rate(confirmed_today: int, professionals: int) -> int:
    total_slots = professionals * SLOTS_PER_PROFESSIONAL
    if total_slots <= 0:
        return 0
    return round(confirmed_today / total_slots * 100)


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def get_dashboard(self, user: User, today: Optional[date] = None) -> dict:
        today = today or date.today()
        start, end = view_range("day", today)
        appointments = AppointmentRepository.get_appointments(self.db, user.id, start, end)
        confirmed = sum(1 for a in appointments if a.status == "confirmed")

        professionals = ProfessionalRepository.count(self.db, user.id)
        month_start, month_end = period_range("current_month", today)
        paid_income = (
            self.db.query(FinancialTransaction.amount)
            .filter(
                FinancialTransaction.user_id == user.id,
                FinancialTransaction.type == "income",
                FinancialTransaction.status == "paid",
                FinancialTransaction.date >= month_start,
                FinancialTransaction.date <= month_end,
            )
            .all()
        )

        return {
            "today_appointments": [AppointmentResponse.from_appointment(a) for a in appointments],
            "today_count": len(appointments),
            "total_clients": self.db.query(Client).filter(Client.user_id == user.id).count(),
            "total_professionals": professionals,
            "total_services": ServiceRepository.count(self.db, user.id),
            "monthly_revenue": to_money(sum((to_money(row[0]) for row in paid_income), to_money(0))),
            "occupation_rate": occupation_rate(confirmed, professionals),
            "birthdays": [
                ClientResponse.model_validate(c) for c in ClientRepository.get_birthdays(self.db, user.id, today)
            ],
        }
