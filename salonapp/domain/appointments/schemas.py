"""Appointment schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...models import Appointment

AgendaView = Literal["day", "week", "month"]


class AppointmentCreate(BaseModel):
    client_id: int
    professional_id: int
    service_id: int
    date: datetime

    @field_validator("date")
    @classmethod
    def salon_wall_clock(cls, v: datetime):
        # Stored as the salon's local wall-clock time
        return v.replace(tzinfo=None)


class AppointmentUpdate(AppointmentCreate):
    """Edit replaces client, professional, service and time"""


class CancelRequest(BaseModel):
    confirm: bool = False


class NotificationResponse(BaseModel):
    channel: str
    message_type: str
    to_phone: str
    message: str
    link: str


class AppointmentResponse(BaseModel):
    id: int
    client_id: int
    professional_id: int
    service_id: int
    date: datetime
    status: str
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    professional_name: Optional[str] = None
    service_name: Optional[str] = None
    service_price: Optional[float] = None
    service_duration: Optional[int] = None

    @classmethod
    def from_appointment(cls, a: Appointment) -> "AppointmentResponse":
        return cls(
            id=a.id,
            client_id=a.client_id,
            professional_id=a.professional_id,
            service_id=a.service_id,
            date=a.date,
            status=a.status,
            client_name=a.client.name if a.client else None,
            client_phone=a.client.phone if a.client else None,
            professional_name=a.professional.name if a.professional else None,
            service_name=a.service.name if a.service else None,
            service_price=float(a.service.price) if a.service else None,
            service_duration=a.service.duration if a.service else None,
        )


class AppointmentActionResponse(BaseModel):
    appointment: AppointmentResponse
    notification: Optional[NotificationResponse] = None
