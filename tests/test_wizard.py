from datetime import date

import pytest

from salonapp.domain.booking.wizard import BookingWizard
from salonapp.exceptions import InvalidTransition, ValidationFailed


def filled_wizard():
    wizard = BookingWizard()
    wizard.select_service(1)
    wizard.next()
    wizard.select_professional(2)
    wizard.next()
    wizard.select_datetime(date(2030, 5, 6), "10:00")
    wizard.next()
    return wizard


def test_steps_advance_in_order():
    wizard = filled_wizard()
    assert wizard.step == "confirm"
    assert wizard.mark_success() == "success"


def test_cannot_advance_without_selection():
    wizard = BookingWizard()
    with pytest.raises(ValidationFailed):
        wizard.next()

    wizard.select_service(1)
    wizard.next()
    with pytest.raises(ValidationFailed):
        wizard.next()


def test_date_step_needs_date_and_time():
    wizard = BookingWizard()
    wizard.select_service(1)
    wizard.next()
    wizard.select_professional(2)
    wizard.next()
    wizard.select_datetime(date(2030, 5, 6), None)
    with pytest.raises(ValidationFailed):
        wizard.next()


def test_back_keeps_later_selections():
    wizard = filled_wizard()
    assert wizard.back() == "date"
    assert wizard.back() == "professional"
    assert wizard.back() == "service"
    assert wizard.back() == "service"

    assert wizard.service_id == 1
    assert wizard.professional_id == 2
    assert wizard.date == date(2030, 5, 6)
    assert wizard.time == "10:00"

    wizard.next()
    wizard.next()
    wizard.next()
    assert wizard.step == "confirm"


def test_confirm_step_only_finishes_through_submission():
    wizard = filled_wizard()
    with pytest.raises(InvalidTransition):
        wizard.next()


def test_cannot_finish_before_confirm():
    wizard = BookingWizard()
    with pytest.raises(InvalidTransition):
        wizard.mark_success()


def test_finished_session_is_single_use():
    wizard = filled_wizard()
    wizard.mark_success()

    with pytest.raises(InvalidTransition):
        wizard.back()
    with pytest.raises(InvalidTransition):
        wizard.select_service(3)
    with pytest.raises(InvalidTransition):
        wizard.mark_success()
