"""Catalog domain - professionals and the services offered by the salon"""

from .router import professionals_router, services_router

__all__ = ["professionals_router", "services_router"]
