"""Appointment service - lifecycle transitions and their ledger side effects"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import InvalidTransition, MissingPrerequisite, NotFound, ValidationFailed
from ...models import Appointment, Client, Professional, Service, User
from ...services.notification_service import (
    build_cancellation_message,
    build_confirmation_message,
    build_reminder_message,
)
from ..catalog.repository import ProfessionalRepository, ServiceRepository
from ..clients.repository import ClientRepository
from ..finance.service import FinanceService
from ..settings.service import load_business_settings
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)

CONFIRMABLE = {"pending", "confirmed"}
CANCELLABLE = {"pending", "confirmed", "cancelled"}


def view_range(view: str, reference: date) -> tuple[datetime, datetime]:
    """[start, end) of the day, Sunday-start week or month containing reference"""
    if view == "week":
        start = reference - timedelta(days=(reference.weekday() + 1) % 7)
        end = start + timedelta(days=7)
    elif view == "month":
        start = reference.replace(day=1)
        end = (start + timedelta(days=32)).replace(day=1)
    else:
        start = reference
        end = reference + timedelta(days=1)
    return datetime.combine(start, datetime.min.time()), datetime.combine(end, datetime.min.time())


class AppointmentService:
    """
    Appointment lifecycle manager.

    Each operation writes the appointment and its ledger records in one
    database transaction. Client messages go out after the commit and a
    messaging failure never undoes the state change.
    """

    def __init__(self, db: Session, messenger=None):
        self.db = db
        self.messenger = messenger
        self.repo = AppointmentRepository()
        self.finance = FinanceService(db)

    def get_appointment(self, appointment_id: int, user: User) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id, user.id)
        if not appointment:
            raise NotFound("Appointment not found")
        return appointment

    def _resolve(
        self, user: User, client_id: int, professional_id: int, service_id: int
    ) -> tuple[Client, Professional, Service]:
        if not client_id or not professional_id or not service_id:
            raise ValidationFailed("Client, professional and service are required")
        client = ClientRepository.get_client_by_id(self.db, client_id, user.id)
        if not client:
            raise NotFound("Client not found")
        professional = ProfessionalRepository.get_professional_by_id(self.db, professional_id, user.id)
        if not professional:
            raise NotFound("Professional not found")
        service = ServiceRepository.get_service_by_id(self.db, service_id, user.id)
        if not service:
            raise NotFound("Service not found")
        return client, professional, service

    # ------------------------------------------------------------------
    # Create / update
    # ------------------------------------------------------------------

    def stage_appointment(
        self, user: User, client: Client, professional: Professional, service: Service, when: datetime
    ) -> Appointment:
        """Pending appointment plus its income record, without committing"""
        if when is None:
            raise ValidationFailed("Date and time are required")
        appointment = self.repo.create_appointment(
            self.db,
            user.id,
            client=client,
            professional=professional,
            service=service,
            date=when,
            status="pending",
        )
        self.finance.stage_booking_income(user, appointment)
        return appointment

    def create_appointment(
        self, user: User, client_id: int, professional_id: int, service_id: int, when: datetime
    ) -> Appointment:
        client, professional, service = self._resolve(user, client_id, professional_id, service_id)
        try:
            appointment = self.stage_appointment(user, client, professional, service, when)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create appointment for user {user.id}: {e}")
            raise

        self.db.refresh(appointment)
        logger.info(
            f"✅ Appointment {appointment.id} created: {service.name} for {client.name} "
            f"on {when:%Y-%m-%d %H:%M}"
        )
        return appointment

    def update_appointment(
        self,
        appointment_id: int,
        user: User,
        client_id: int,
        professional_id: int,
        service_id: int,
        when: datetime,
    ) -> Appointment:
        """
        Reassign client, professional, service and time.

        The price is locked when the appointment is booked: linked ledger
        records keep their amount, description and date.
        """
        appointment = self.get_appointment(appointment_id, user)
        client, professional, service = self._resolve(user, client_id, professional_id, service_id)
        if when is None:
            raise ValidationFailed("Date and time are required")

        appointment.client = client
        appointment.professional = professional
        appointment.service = service
        appointment.date = when
        self.db.commit()
        self.db.refresh(appointment)
        logger.info(f"✏️ Appointment {appointment.id} updated")
        return appointment

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    def confirm_appointment(
        self, appointment_id: int, user: User, now: Optional[datetime] = None
    ) -> tuple[Appointment, Optional[dict]]:
        appointment = self.get_appointment(appointment_id, user)
        if appointment.status not in CONFIRMABLE:
            raise InvalidTransition(f"Cannot confirm an appointment that is {appointment.status}")

        try:
            appointment.status = "confirmed"
            paid = self.finance.stage_appointment_paid(appointment, now or datetime.utcnow())
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to confirm appointment {appointment_id}: {e}")
            raise

        self.db.refresh(appointment)
        logger.info(f"✅ Appointment {appointment.id} confirmed ({paid} transaction(s) marked paid)")

        settings = load_business_settings(user.settings)
        notice = self._notify(
            user,
            appointment,
            "confirmation",
            lambda: build_confirmation_message(
                appointment, settings.notifications.confirmation, user.salon_name
            ),
        )
        return appointment, notice

    def cancel_appointment(
        self, appointment_id: int, user: User, confirm: bool = False
    ) -> tuple[Appointment, Optional[dict]]:
        """Cancel an appointment and its ledger records. There is no uncancel."""
        if not confirm:
            raise ValidationFailed("Cancelling cannot be undone; confirm to proceed")
        appointment = self.get_appointment(appointment_id, user)
        if appointment.status not in CANCELLABLE:
            raise InvalidTransition(f"Cannot cancel an appointment that is {appointment.status}")

        try:
            appointment.status = "cancelled"
            cancelled = self.finance.stage_appointment_cancelled(appointment)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to cancel appointment {appointment_id}: {e}")
            raise

        self.db.refresh(appointment)
        logger.info(f"🚫 Appointment {appointment.id} cancelled ({cancelled} transaction(s) cancelled)")

        notice = self._notify(
            user,
            appointment,
            "cancellation",
            lambda: build_cancellation_message(appointment, user.salon_name),
        )
        return appointment, notice

    def complete_appointment(self, appointment_id: int, user: User) -> Appointment:
        appointment = self.get_appointment(appointment_id, user)
        appointment.status = "completed"
        self.db.commit()
        self.db.refresh(appointment)
        logger.info(f"✅ Appointment {appointment.id} completed")
        return appointment

    def send_reminder(self, appointment_id: int, user: User, today: Optional[date] = None) -> dict:
        """Compose and deliver a reminder. Read-only for the appointment and ledger."""
        appointment = self.get_appointment(appointment_id, user)
        if not appointment.client or not appointment.client.phone:
            raise MissingPrerequisite("The client has no phone number on file")
        if self.messenger is None:
            raise MissingPrerequisite("No messaging channel configured")

        settings = load_business_settings(user.settings)
        body = build_reminder_message(
            appointment, today or date.today(), user.salon_name, settings.notifications.reminder
        )
        return self.messenger.deliver(user, appointment, appointment.client.phone, "reminder", body)

    def _notify(self, user: User, appointment: Appointment, message_type: str, compose) -> Optional[dict]:
        """Best-effort client message after a committed state change"""
        phone = appointment.client.phone if appointment.client else None
        if not phone:
            logger.info(f"ℹ️ No phone for appointment {appointment.id}; {message_type} not sent")
            return None
        if self.messenger is None:
            return None
        try:
            return self.messenger.deliver(user, appointment, phone, message_type, compose())
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to deliver {message_type} for appointment {appointment.id}: {e}")
            return None

    # ------------------------------------------------------------------
    # Agenda
    # ------------------------------------------------------------------

    def get_appointments(self, user: User, view: str = "day", reference: Optional[date] = None) -> list[Appointment]:
        start, end = view_range(view, reference or date.today())
        return self.repo.get_appointments(self.db, user.id, start, end)

    def get_appointment_dates(self, user: User) -> list[datetime]:
        """Instants of every appointment, for calendar markers"""
        return self.repo.get_appointment_dates(self.db, user.id)
