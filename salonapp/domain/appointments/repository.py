"""Appointment repository - Database operations for appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def _with_relations(db: Session):
        return db.query(Appointment).options(
            joinedload(Appointment.client),
            joinedload(Appointment.professional),
            joinedload(Appointment.service),
        )

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: int, user_id: int) -> Optional[Appointment]:
        return (
            AppointmentRepository._with_relations(db)
            .filter(Appointment.id == appointment_id, Appointment.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_appointments(
        db: Session,
        user_id: int,
        start: datetime,
        end: datetime,
        professional_id: Optional[int] = None,
        exclude_cancelled: bool = False,
        status: Optional[str] = None,
    ) -> list[Appointment]:
        """Appointments starting in [start, end), ordered by time"""
        query = AppointmentRepository._with_relations(db).filter(
            Appointment.user_id == user_id,
            Appointment.date >= start,
            Appointment.date < end,
        )
        if professional_id is not None:
            query = query.filter(Appointment.professional_id == professional_id)
        if exclude_cancelled:
            query = query.filter(Appointment.status != "cancelled")
        if status:
            query = query.filter(Appointment.status == status)
        return query.order_by(Appointment.date, Appointment.id).all()

    @staticmethod
    def get_appointment_dates(db: Session, user_id: int) -> list[datetime]:
        rows = (
            db.query(Appointment.date)
            .filter(Appointment.user_id == user_id)
            .order_by(Appointment.date)
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def create_appointment(db: Session, user_id: int, **data) -> Appointment:
        appointment = Appointment(user_id=user_id, **data)
        db.add(appointment)
        db.flush()
        return appointment
