"""Settings domain schemas - business hours, booking rules and message templates"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...shared.validators import normalize_phone, validate_time_of_day

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

DEFAULT_CONFIRMATION_TEMPLATE = (
    "Olá {nome}, seu agendamento de {servico} está confirmado para {data} às {hora}. 💇‍♀️"
)
DEFAULT_REMINDER_TEMPLATE = (
    "Oi {nome}! Passando para lembrar do seu horário de {servico} amanhã às {hora}. Até lá! ✨"
)


class DayHours(BaseModel):
    open: str = "09:00"
    close: str = "18:00"
    active: bool = True

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)


def _day(open_: str, close: str, active: bool):
    return Field(default_factory=lambda: DayHours(open=open_, close=close, active=active))


class WeekHours(BaseModel):
    """Operating hours keyed by lowercase English weekday name"""

    model_config = ConfigDict(extra="forbid")

    monday: DayHours = _day("09:00", "18:00", True)
    tuesday: DayHours = _day("09:00", "18:00", True)
    wednesday: DayHours = _day("09:00", "18:00", True)
    thursday: DayHours = _day("09:00", "18:00", True)
    friday: DayHours = _day("09:00", "18:00", True)
    saturday: DayHours = _day("09:00", "14:00", True)
    sunday: DayHours = _day("00:00", "00:00", False)


class BookingRules(BaseModel):
    cancellationWindow: int = Field(24, ge=0)  # hours
    bufferTime: int = Field(0, ge=0)  # minutes


class OnlineBooking(BaseModel):
    active: bool = False


class NotificationTemplates(BaseModel):
    confirmation: str = DEFAULT_CONFIRMATION_TEMPLATE
    reminder: str = DEFAULT_REMINDER_TEMPLATE  # sent the day before; other days use the built-in text


class BusinessSettings(BaseModel):
    """Settings stored as JSON on the operator profile"""

    hours: WeekHours = Field(default_factory=WeekHours)
    rules: BookingRules = Field(default_factory=BookingRules)
    onlineBooking: OnlineBooking = Field(default_factory=OnlineBooking)
    notifications: NotificationTemplates = Field(default_factory=NotificationTemplates)


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    salon_name: Optional[str] = None
    whatsapp: Optional[str] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None

    @field_validator("whatsapp")
    @classmethod
    def validate_whatsapp(cls, v):
        return normalize_phone(v)


class ProfileResponse(BaseModel):
    id: int
    email: str
    display_name: Optional[str] = None
    salon_name: Optional[str] = None
    whatsapp: Optional[str] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None
    public_id: str
    booking_url: str
    subscription_status: str
    trial_ends_at: Optional[datetime] = None
