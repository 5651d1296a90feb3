"""
WhatsApp notification service
Composes client messages for appointment events and delivers them as
click-to-chat links (https://wa.me/...), logging every delivery.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional
from urllib.parse import quote

from fastapi import Depends
from sqlalchemy.orm import Session

from ..config import WHATSAPP_COUNTRY_CODE
from ..database import get_db
from ..models import Appointment, NotificationLog, User
from ..shared.validators import format_whatsapp_number

logger = logging.getLogger(__name__)


def format_date_br(value: datetime) -> str:
    return value.strftime("%d/%m/%Y")


def format_time(value: datetime) -> str:
    return value.strftime("%H:%M")


def render_template(template: str, values: dict) -> str:
    """Replace {placeholder} tokens; unknown tokens are left as typed"""
    for key, value in values.items():
        template = template.replace("{" + key + "}", value or "")
    return template


def template_values(appointment: Appointment) -> dict:
    return {
        "nome": appointment.client.name,
        "servico": appointment.service.name,
        "data": format_date_br(appointment.date),
        "hora": format_time(appointment.date),
        "profissional": appointment.professional.name,
    }


def _signature(salon_name: Optional[str]) -> str:
    return f"\n\n{salon_name}" if salon_name else ""


def build_confirmation_message(
    appointment: Appointment, template: Optional[str] = None, salon_name: Optional[str] = None
) -> str:
    """Owner's confirmation template, or the built-in text when the template is blank"""
    values = template_values(appointment)
    if template and template.strip():
        return render_template(template, values)

    return (
        f"Olá {values['nome']}! ✅\n\n"
        f"Seu agendamento foi *CONFIRMADO*:\n"
        f"📅 Data: {values['data']}\n"
        f"⏰ Horário: {values['hora']}\n"
        f"💇 Serviço: {values['servico']}\n"
        f"👤 Profissional: {values['profissional']}"
        f"{_signature(salon_name)}"
    )


def build_cancellation_message(appointment: Appointment, salon_name: Optional[str] = None) -> str:
    values = template_values(appointment)
    return (
        f"Olá {values['nome']}!\n\n"
        f"Infelizmente seu agendamento foi *CANCELADO*:\n"
        f"📅 Data: {values['data']}\n"
        f"⏰ Horário: {values['hora']}\n"
        f"💇 Serviço: {values['servico']}\n\n"
        f"Entre em contato para reagendar."
        f"{_signature(salon_name)}"
    )


def reminder_when(appointment_day: date, today: date) -> str:
    if appointment_day == today:
        return "para *HOJE*"
    if appointment_day == today + timedelta(days=1):
        return "para *AMANHÃ*"
    return f"para o dia {appointment_day.strftime('%d/%m/%Y')}"


def build_reminder_message(
    appointment: Appointment,
    today: date,
    salon_name: Optional[str] = None,
    template: Optional[str] = None,
) -> str:
    """
    Reminder text relative to today.

    The owner's reminder template is the day-before message: it is used when
    the appointment is tomorrow and the template is not blank.
    """
    values = template_values(appointment)
    appointment_day = appointment.date.date()
    if template and template.strip() and appointment_day == today + timedelta(days=1):
        return render_template(template, values)

    return (
        f"Olá {values['nome']}! 📅\n\n"
        f"Lembrete do seu agendamento {reminder_when(appointment_day, today)}:\n"
        f"📅 Data: {values['data']}\n"
        f"⏰ Horário: {values['hora']}\n"
        f"💇 Serviço: {values['servico']}\n"
        f"👤 Profissional: {values['profissional']}\n\n"
        f"Esperamos você! 😊"
        f"{_signature(salon_name)}"
    )


def whatsapp_link(phone: str, message: str) -> str:
    number = format_whatsapp_number(phone, WHATSAPP_COUNTRY_CODE)
    return f"https://wa.me/{number}?text={quote(message, safe='')}"


class WhatsAppMessenger:
    """Delivers messages as WhatsApp click-to-chat links"""

    channel = "whatsapp"

    def __init__(self, db: Session):
        self.db = db

    def deliver(
        self,
        user: User,
        appointment: Appointment,
        to_phone: str,
        message_type: str,
        message_body: str,
    ) -> dict:
        """
        Compose the link and record it in the notification log.

        Returns a dict with channel, message_type, link and message so the
        caller (the dashboard) can open the conversation.
        """
        log = NotificationLog(
            user_id=user.id,
            appointment_id=appointment.id,
            to_phone=to_phone,
            message_type=message_type,
            message_body=message_body,
        )
        try:
            link = whatsapp_link(to_phone, message_body)
            log.link = link
            log.status = "composed"
        except Exception as e:
            log.status = "failed"
            log.error_message = str(e)
            self.db.add(log)
            self.db.commit()
            logger.error(f"❌ Failed to compose {message_type} message for {to_phone}: {e}")
            raise

        self.db.add(log)
        self.db.commit()
        logger.info(f"📱 {message_type} message composed for appointment {appointment.id}")
        return {
            "channel": self.channel,
            "message_type": message_type,
            "to_phone": to_phone,
            "message": message_body,
            "link": link,
        }


def get_messenger(db: Session = Depends(get_db)) -> WhatsAppMessenger:
    """Dependency injection for the client messenger"""
    return WhatsAppMessenger(db)
