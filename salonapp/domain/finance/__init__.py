"""Finance domain - ledger side effects, payments, expenses and statistics"""

from .router import router

__all__ = ["router"]
