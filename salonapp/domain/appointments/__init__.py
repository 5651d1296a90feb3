"""Appointments domain - agenda and appointment lifecycle"""

from .router import router

__all__ = ["router"]
