from datetime import date, datetime
from types import SimpleNamespace

import pytest

from salonapp.models import Appointment, NotificationLog
from salonapp.services.notification_service import (
    WhatsAppMessenger,
    build_cancellation_message,
    build_confirmation_message,
    build_reminder_message,
    render_template,
    reminder_when,
    whatsapp_link,
)


def booking(when=datetime(2030, 5, 6, 14, 30)):
    return SimpleNamespace(
        id=1,
        date=when,
        client=SimpleNamespace(name="Maria", phone="(24) 99999-0000"),
        service=SimpleNamespace(name="Corte"),
        professional=SimpleNamespace(name="Carla"),
    )


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2030, 5, 6), "para *HOJE*"),
        (date(2030, 5, 7), "para *AMANHÃ*"),
        (date(2030, 5, 9), "para o dia 09/05/2030"),
    ],
)
def test_reminder_when(day, expected):
    assert reminder_when(day, date(2030, 5, 6)) == expected


def test_reminder_message_for_tomorrow():
    message = build_reminder_message(booking(), date(2030, 5, 5), "Studio Bella")

    assert "Lembrete do seu agendamento para *AMANHÃ*" in message
    assert "📅 Data: 06/05/2030" in message
    assert "⏰ Horário: 14:30" in message
    assert message.endswith("\n\nStudio Bella")


def test_reminder_template_only_applies_the_day_before():
    template = "Oi {nome}, amanhã às {hora}!"

    assert build_reminder_message(booking(), date(2030, 5, 5), None, template) == "Oi Maria, amanhã às 14:30!"
    assert "para *HOJE*" in build_reminder_message(booking(), date(2030, 5, 6), None, template)
    assert "para *AMANHÃ*" in build_reminder_message(booking(), date(2030, 5, 5), None, "  ")


def test_confirmation_uses_owner_template():
    message = build_confirmation_message(
        booking(), "Oi {nome}, {servico} com {profissional} em {data} às {hora}. {outro}"
    )
    assert message == "Oi Maria, Corte com Carla em 06/05/2030 às 14:30. {outro}"


def test_confirmation_falls_back_to_builtin_text():
    message = build_confirmation_message(booking(), "   ", None)

    assert "*CONFIRMADO*" in message
    assert "👤 Profissional: Carla" in message
    assert not message.endswith("\n\n")


def test_cancellation_signature():
    message = build_cancellation_message(booking(), "Studio Bella")

    assert "*CANCELADO*" in message
    assert message.endswith("Entre em contato para reagendar.\n\nStudio Bella")


def test_render_template_blank_value():
    assert render_template("{nome}!", {"nome": None}) == "!"


def test_whatsapp_link_prefixes_country_code_and_encodes():
    link = whatsapp_link("(24) 99999-0000", "Olá Maria & cia\nAté")

    assert link == "https://wa.me/5524999990000?text=Ol%C3%A1%20Maria%20%26%20cia%0AAt%C3%A9"


def test_whatsapp_link_keeps_existing_country_code():
    assert whatsapp_link("+55 24 99999-0000", "oi").startswith("https://wa.me/5524999990000?")


def test_messenger_logs_delivery(db, owner, catalog):
    appointment = Appointment(
        user_id=owner.id,
        client=catalog.client,
        professional=catalog.professional,
        service=catalog.service,
        date=datetime(2030, 5, 6, 10, 0),
    )
    db.add(appointment)
    db.commit()

    notice = WhatsAppMessenger(db).deliver(owner, appointment, catalog.client.phone, "reminder", "Oi")

    assert notice["channel"] == "whatsapp"
    assert notice["link"] == "https://wa.me/5524999990000?text=Oi"
    log = db.query(NotificationLog).one()
    assert (log.status, log.message_type, log.appointment_id) == ("composed", "reminder", appointment.id)
