"""Billing schemas - subscription status and admin account management"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SubscriptionStatusResponse(BaseModel):
    subscription_status: str
    trial_ends_at: Optional[datetime] = None
    trial_days_left: Optional[int] = None
    last_payment_date: Optional[datetime] = None
    is_admin: bool
    allowed: bool
    reason: Optional[str] = None


class AccountResponse(BaseModel):
    """Operator profile as seen by the operator (/auth/me) or an admin"""

    id: int
    email: str
    display_name: Optional[str] = None
    salon_name: Optional[str] = None
    whatsapp: Optional[str] = None
    public_id: str
    subscription_status: str
    trial_ends_at: Optional[datetime] = None
    last_payment_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BlockRequest(BaseModel):
    confirm: bool = False
