from datetime import date, datetime

from salonapp.domain.booking.availability import available_slots, generate_slots
from salonapp.domain.settings.schemas import WeekHours

MONDAY = date(2030, 5, 6)
SUNDAY = date(2030, 5, 12)


def hours_with(**days):
    return {name: config for name, config in days.items()}


def test_slots_for_configured_weekday():
    hours = hours_with(monday={"open": "09:00", "close": "12:00", "active": True})
    assert generate_slots(MONDAY, hours) == ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]


def test_open_and_close_are_truncated_to_the_hour():
    hours = hours_with(monday={"open": "09:45", "close": "13:30", "active": True})
    assert generate_slots(MONDAY, hours) == [
        "09:00", "09:30", "10:00", "10:30", "11:00", "11:30", "12:00", "12:30",
    ]


def test_inactive_weekday_has_no_slots():
    hours = hours_with(monday={"open": "09:00", "close": "12:00", "active": False})
    assert generate_slots(MONDAY, hours) == []


def test_unconfigured_weekday_has_no_slots():
    hours = hours_with(tuesday={"open": "09:00", "close": "12:00", "active": True})
    assert generate_slots(MONDAY, hours) == []


def test_open_after_close_has_no_slots():
    hours = hours_with(monday={"open": "18:00", "close": "09:00", "active": True})
    assert generate_slots(MONDAY, hours) == []


def test_default_week_hours():
    hours = WeekHours()
    assert generate_slots(SUNDAY, hours) == []
    assert generate_slots(MONDAY, hours)[0] == "09:00"
    assert generate_slots(MONDAY, hours)[-1] == "17:30"
    assert generate_slots(date(2030, 5, 11), hours)[-1] == "13:30"


def test_booked_appointment_removes_its_slots():
    hours = hours_with(monday={"open": "09:00", "close": "12:00", "active": True})
    booked = [(datetime(2030, 5, 6, 10, 0), 60)]
    assert available_slots(MONDAY, hours, booked) == ["09:00", "09:30", "11:00", "11:30"]


def test_buffer_blocks_the_window_after_each_appointment():
    hours = hours_with(monday={"open": "09:00", "close": "12:00", "active": True})
    booked = [(datetime(2030, 5, 6, 9, 0), 30)]
    assert available_slots(MONDAY, hours, booked, buffer_minutes=15) == [
        "10:00", "10:30", "11:00", "11:30",
    ]


def test_longer_service_needs_a_free_window():
    hours = hours_with(monday={"open": "09:00", "close": "12:00", "active": True})
    booked = [(datetime(2030, 5, 6, 11, 0), 30)]
    assert available_slots(MONDAY, hours, booked, duration_minutes=60) == [
        "09:00", "09:30", "10:00", "11:30",
    ]


def test_nothing_booked_matches_generated_slots():
    hours = WeekHours()
    assert available_slots(MONDAY, hours) == generate_slots(MONDAY, hours)
