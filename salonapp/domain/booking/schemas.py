"""Public booking schemas"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_time_of_day


class PublicService(BaseModel):
    id: int
    name: str
    price: float
    duration: int
    description: Optional[str] = None

    class Config:
        from_attributes = True


class PublicProfessional(BaseModel):
    id: int
    name: str
    specialties: list[str] = []

    @field_validator("specialties", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []

    class Config:
        from_attributes = True


class BookingPage(BaseModel):
    """What the public booking link shows; available=False is a terminal state"""

    available: bool
    salon_name: Optional[str] = None
    address: Optional[str] = None
    whatsapp: Optional[str] = None
    logo_url: Optional[str] = None
    services: list[PublicService] = []
    professionals: list[PublicProfessional] = []


class SlotsResponse(BaseModel):
    date: date_type
    slots: list[str]


class PublicBookingRequest(BaseModel):
    service_id: Optional[int] = None
    professional_id: Optional[int] = None
    date: Optional[date_type] = None
    time: Optional[str] = None
    client_name: Optional[str] = None
    client_phone: Optional[str] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        if v is None:
            return v
        return validate_time_of_day(v)


class BookingConfirmation(BaseModel):
    appointment_id: int
    status: str
    date: datetime
    service_name: str
    professional_name: str
    client_name: str
    salon_name: Optional[str] = None
