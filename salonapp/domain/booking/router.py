"""Public booking router - no authentication, addressed by the salon's public id"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...rate_limiter import create_rate_limiter
from .schemas import BookingConfirmation, BookingPage, PublicBookingRequest, SlotsResponse
from .service import PublicBookingService

router = APIRouter(prefix="/public/booking", tags=["Public Booking"])

booking_rate_limit = create_rate_limiter(limit=10, window_seconds=600, key_prefix="public_booking")


def get_public_booking_service(db: Session = Depends(get_db)) -> PublicBookingService:
    return PublicBookingService(db)


@router.get("/{owner_public_id}", response_model=BookingPage)
async def get_booking_page(
    owner_public_id: str,
    service: PublicBookingService = Depends(get_public_booking_service),
):
    """Salon profile, services and professionals, or available=false"""
    return service.get_booking_page(owner_public_id)


@router.get("/{owner_public_id}/slots", response_model=SlotsResponse)
async def get_slots(
    owner_public_id: str,
    day: date = Query(..., alias="date"),
    service_id: Optional[int] = Query(None),
    professional_id: Optional[int] = Query(None),
    service: PublicBookingService = Depends(get_public_booking_service),
):
    slots = service.get_slots(owner_public_id, day, service_id, professional_id)
    return SlotsResponse(date=day, slots=slots)


@router.post("/{owner_public_id}", response_model=BookingConfirmation, status_code=201)
async def book(
    owner_public_id: str,
    data: PublicBookingRequest,
    service: PublicBookingService = Depends(get_public_booking_service),
    _: None = Depends(booking_rate_limit),
):
    """Book an appointment as a visitor. The appointment starts as pending."""
    return service.book(owner_public_id, data)
