"""Booking domain - availability and the public booking flow"""

from .router import router

__all__ = ["router"]
