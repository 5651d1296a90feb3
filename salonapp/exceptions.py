"""
Domain errors raised by the salon services.

Services raise these instead of HTTP errors so they can be exercised without a
request; main.py renders them as {"detail": ...} with the matching status code.
"""


class SalonError(Exception):
    """Base class for user-facing domain errors"""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(SalonError):
    """Input rejected before any write (missing field, amount out of range...)"""

    status_code = 400


class NotFound(SalonError):
    """Record does not exist for the requesting owner"""

    status_code = 404


class InvalidTransition(SalonError):
    """Status change not allowed from the record's current state"""

    status_code = 409


class MissingPrerequisite(SalonError):
    """Action needs data the record does not have (e.g. a client phone)"""

    status_code = 422


class BookingUnavailable(SalonError):
    """Online booking is switched off for the salon"""

    status_code = 403


class SubscriptionRequired(SalonError):
    """Trial expired or subscription cancelled / past due"""

    status_code = 402
