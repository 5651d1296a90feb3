"""Billing domain - trial/subscription status and admin account management"""

from .router import admin_router, auth_router, router

__all__ = ["admin_router", "auth_router", "router"]
