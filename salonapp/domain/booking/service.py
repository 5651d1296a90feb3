"""Public booking service - unauthenticated booking against a salon's public link"""

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import BookingUnavailable, NotFound, ValidationFailed
from ...models import User
from ...shared.validators import normalize_phone
from ...subscription import check_subscription
from ...utils.sanitization import clean_public_text
from ..appointments.repository import AppointmentRepository
from ..appointments.service import AppointmentService
from ..catalog.repository import ProfessionalRepository, ServiceRepository
from ..clients.service import ClientService
from ..settings.service import load_business_settings
from .availability import available_slots, slot_start
from .schemas import (
    BookingConfirmation,
    BookingPage,
    PublicBookingRequest,
    PublicProfessional,
    PublicService,
)
from .wizard import BookingWizard

logger = logging.getLogger(__name__)


def stored_hours(owner: User) -> dict:
    """Weekly hours exactly as the owner saved them; unsaved weekdays have no slots"""
    hours = (owner.settings or {}).get("hours")
    return hours if isinstance(hours, dict) else {}


class PublicBookingService:
    def __init__(self, db: Session):
        self.db = db
        self.appointments = AppointmentService(db)
        self.clients = ClientService(db)

    def get_owner(self, owner_public_id: str) -> User:
        owner = self.db.query(User).filter(User.public_id == owner_public_id).first()
        if not owner:
            raise NotFound("Salon not found")
        return owner

    def is_accepting_bookings(self, owner: User) -> bool:
        settings = load_business_settings(owner.settings)
        allowed, _ = check_subscription(owner)
        return settings.onlineBooking.active and allowed

    def _open_owner(self, owner_public_id: str) -> User:
        owner = self.get_owner(owner_public_id)
        if not self.is_accepting_bookings(owner):
            raise BookingUnavailable("Online booking is not available for this salon")
        return owner

    def get_booking_page(self, owner_public_id: str) -> BookingPage:
        owner = self.get_owner(owner_public_id)
        if not self.is_accepting_bookings(owner):
            return BookingPage(available=False, salon_name=owner.salon_name)
        return BookingPage(
            available=True,
            salon_name=owner.salon_name,
            address=owner.address,
            whatsapp=owner.whatsapp,
            logo_url=owner.logo_url,
            services=[PublicService.model_validate(s) for s in ServiceRepository.get_services(self.db, owner.id)],
            professionals=[
                PublicProfessional.model_validate(p)
                for p in ProfessionalRepository.get_professionals(self.db, owner.id)
            ],
        )

    def _slots_for(
        self,
        owner: User,
        day: date,
        professional_id: Optional[int] = None,
        duration_minutes: int = 30,
    ) -> list[str]:
        settings = load_business_settings(owner.settings)
        start = datetime.combine(day, datetime.min.time())
        end = datetime.combine(day, datetime.max.time())
        booked = [
            (a.date, a.service.duration if a.service else 0)
            for a in AppointmentRepository.get_appointments(
                self.db, owner.id, start, end, professional_id=professional_id, exclude_cancelled=True
            )
        ]
        return available_slots(
            day,
            stored_hours(owner),
            booked,
            buffer_minutes=settings.rules.bufferTime,
            duration_minutes=duration_minutes,
        )

    def get_slots(
        self,
        owner_public_id: str,
        day: date,
        service_id: Optional[int] = None,
        professional_id: Optional[int] = None,
    ) -> list[str]:
        owner = self._open_owner(owner_public_id)
        duration = 30
        if service_id is not None:
            service = ServiceRepository.get_service_by_id(self.db, service_id, owner.id)
            if not service:
                raise NotFound("Service not found")
            duration = service.duration
        if professional_id is not None and not ProfessionalRepository.get_professional_by_id(
            self.db, professional_id, owner.id
        ):
            raise NotFound("Professional not found")
        return self._slots_for(owner, day, professional_id, duration)

    def book(self, owner_public_id: str, data: PublicBookingRequest) -> BookingConfirmation:
        """
        Run the wizard to completion and create a pending appointment.

        The client is matched by exact phone (first match wins) or created
        with name and phone. The appointment is never auto-confirmed.
        """
        owner = self._open_owner(owner_public_id)

        wizard = BookingWizard()
        wizard.select_service(data.service_id)
        wizard.next()
        wizard.select_professional(data.professional_id)
        wizard.next()
        wizard.select_datetime(data.date, data.time)
        wizard.next()

        try:
            name = clean_public_text(data.client_name)
            phone = normalize_phone(clean_public_text(data.client_phone, max_length=50))
        except ValueError as e:
            raise ValidationFailed(str(e)) from e
        if not name or not phone:
            raise ValidationFailed("Name and phone are required")

        service = ServiceRepository.get_service_by_id(self.db, wizard.service_id, owner.id)
        if not service:
            raise NotFound("Service not found")
        professional = ProfessionalRepository.get_professional_by_id(self.db, wizard.professional_id, owner.id)
        if not professional:
            raise NotFound("Professional not found")

        if wizard.time not in self._slots_for(owner, wizard.date, professional.id, service.duration):
            logger.warning(f"⚠️ Public booking for unavailable slot {wizard.date} {wizard.time} (owner {owner.id})")
            raise ValidationFailed("This time is no longer available. Please choose another one.")

        when = slot_start(wizard.date, wizard.time)
        try:
            client = self.clients.find_or_create_by_phone(owner, name, phone)
            appointment = self.appointments.stage_appointment(owner, client, professional, service, when)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Public booking failed for owner {owner.id}: {e}")
            raise

        wizard.mark_success()
        logger.info(f"✅ Public booking: appointment {appointment.id} for owner {owner.id} on {when:%Y-%m-%d %H:%M}")
        return BookingConfirmation(
            appointment_id=appointment.id,
            status=appointment.status,
            date=appointment.date,
            service_name=service.name,
            professional_name=professional.name,
            client_name=client.name,
            salon_name=owner.salon_name,
        )
