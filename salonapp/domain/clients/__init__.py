"""Clients domain - client records and birthdays"""

from .router import router

__all__ = ["router"]
