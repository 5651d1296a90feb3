"""Public booking wizard: service -> professional -> date -> confirm -> success"""

from datetime import date
from typing import Optional

from ...exceptions import InvalidTransition, ValidationFailed

STEPS = ("service", "professional", "date", "confirm", "success")


class BookingWizard:
    """
    Linear, single-use booking session.

    Moving forward needs the current step's selection; moving back keeps
    every selection. Once the booking succeeds the session is closed.
    """

    def __init__(self):
        self.step = "service"
        self.service_id: Optional[int] = None
        self.professional_id: Optional[int] = None
        self.date: Optional[date] = None
        self.time: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.step == "success"

    def _ensure_open(self):
        if self.finished:
            raise InvalidTransition("This booking is already complete. Start a new session to book again.")

    def select_service(self, service_id: int):
        self._ensure_open()
        self.service_id = service_id

    def select_professional(self, professional_id: int):
        self._ensure_open()
        self.professional_id = professional_id

    def select_datetime(self, day: date, time: str):
        self._ensure_open()
        self.date = day
        self.time = time

    def can_advance(self) -> bool:
        if self.step == "service":
            return self.service_id is not None
        if self.step == "professional":
            return self.professional_id is not None
        if self.step == "date":
            return self.date is not None and bool(self.time)
        return False

    def next(self) -> str:
        self._ensure_open()
        if self.step == "confirm":
            raise InvalidTransition("Submit the booking to finish")
        if not self.can_advance():
            raise ValidationFailed(f"Choose a {self.step} before continuing")
        self.step = STEPS[STEPS.index(self.step) + 1]
        return self.step

    def back(self) -> str:
        self._ensure_open()
        index = STEPS.index(self.step)
        if index > 0:
            self.step = STEPS[index - 1]
        return self.step

    def mark_success(self) -> str:
        self._ensure_open()
        if self.step != "confirm":
            raise InvalidTransition("The booking can only finish from the confirmation step")
        self.step = "success"
        return self.step
