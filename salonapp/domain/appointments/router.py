"""Appointment router - agenda and lifecycle endpoints"""

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user_with_subscription
from ...database import get_db
from ...models import User
from ...services.notification_service import get_messenger
from .schemas import (
    AgendaView,
    AppointmentActionResponse,
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    CancelRequest,
    NotificationResponse,
)
from .service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(
    db: Session = Depends(get_db), messenger=Depends(get_messenger)
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db, messenger)


@router.get("", response_model=list[AppointmentResponse])
async def get_appointments(
    view: AgendaView = Query("day"),
    reference: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(get_current_user_with_subscription),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Agenda for the day, week (Sunday start) or month containing date"""
    return [AppointmentResponse.from_appointment(a) for a in service.get_appointments(current_user, view, reference)]


@router.get("/dates", response_model=list[datetime])
async def get_appointment_dates(
    current_user: User = Depends(get_current_user_with_subscription),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_appointment_dates(current_user)


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book an appointment; a pending income record is created with it"""
    appointment = service.create_appointment(
        current_user, data.client_id, data.professional_id, data.service_id, data.date
    )
    return AppointmentResponse.from_appointment(appointment)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.update_appointment(
        appointment_id, current_user, data.client_id, data.professional_id, data.service_id, data.date
    )
    return AppointmentResponse.from_appointment(appointment)


@router.post("/{appointment_id}/confirm", response_model=AppointmentActionResponse)
async def confirm_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user_with_subscription),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment, notice = service.confirm_appointment(appointment_id, current_user)
    return AppointmentActionResponse(
        appointment=AppointmentResponse.from_appointment(appointment), notification=notice
    )


@router.post("/{appointment_id}/cancel", response_model=AppointmentActionResponse)
async def cancel_appointment(
    appointment_id: int,
    data: CancelRequest,
    current_user: User = Depends(get_current_user_with_subscription),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Cancel an appointment. Requires {"confirm": true}."""
    appointment, notice = service.cancel_appointment(appointment_id, current_user, data.confirm)
    return AppointmentActionResponse(
        appointment=AppointmentResponse.from_appointment(appointment), notification=notice
    )


@router.post("/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user_with_subscription),
    service: AppointmentService = Depends(get_appointment_service),
):
    return AppointmentResponse.from_appointment(service.complete_appointment(appointment_id, current_user))


@router.post("/{appointment_id}/reminder", response_model=NotificationResponse)
async def send_reminder(
    appointment_id: int,
    current_user: User = Depends(get_current_user_with_subscription),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.send_reminder(appointment_id, current_user)
