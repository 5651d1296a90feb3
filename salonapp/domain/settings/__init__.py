"""Settings domain - business hours, booking rules and salon profile"""

from .router import router

__all__ = ["router"]
