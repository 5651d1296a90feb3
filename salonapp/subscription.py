"""
Subscription gating for salon operators.

There is no free plan: new salons get a trial, after which the account must be
activated (by an admin once payment is received) to keep using the dashboard.
"""

from datetime import datetime
from typing import Optional

from .config import ADMIN_EMAILS
from .models import User

BLOCKED_STATUSES = {"cancelled", "past_due"}


def is_admin(user: User) -> bool:
    """Admins bypass the subscription gate and may manage other accounts"""
    return bool(user.is_admin) or (user.email or "").lower() in ADMIN_EMAILS


def is_trial_expired(user: User, now: Optional[datetime] = None) -> bool:
    now = now or datetime.utcnow()
    return (
        user.subscription_status == "trial"
        and user.trial_ends_at is not None
        and now > user.trial_ends_at
    )


def check_subscription(user: User, now: Optional[datetime] = None) -> tuple:
    """
    Check if the operator can use the dashboard.
    Returns (allowed, error_message).
    """
    if is_admin(user):
        return (True, None)

    if user.subscription_status == "active":
        return (True, None)

    if is_trial_expired(user, now):
        return (False, "Your free trial has ended. Please subscribe to keep using the agenda.")

    if user.subscription_status in BLOCKED_STATUSES:
        return (False, "Your subscription is inactive. Please renew to keep using the agenda.")

    return (True, None)


def get_subscription_status(user: User, now: Optional[datetime] = None) -> dict:
    """Summary shown on the payment-required screen"""
    now = now or datetime.utcnow()
    allowed, reason = check_subscription(user, now)
    days_left = None
    if user.subscription_status == "trial" and user.trial_ends_at:
        days_left = max(0, (user.trial_ends_at - now).days)
    return {
        "subscription_status": user.subscription_status,
        "trial_ends_at": user.trial_ends_at,
        "trial_days_left": days_left,
        "last_payment_date": user.last_payment_date,
        "is_admin": is_admin(user),
        "allowed": allowed,
        "reason": reason,
    }
