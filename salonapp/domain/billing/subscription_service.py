"""Subscription service - trial status and manual activation by admins"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import NotFound, ValidationFailed
from ...models import User
from ...subscription import get_subscription_status
from .repository import BillingRepository

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Service layer for subscription operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BillingRepository()

    def get_status(self, user: User, now: Optional[datetime] = None) -> dict:
        return get_subscription_status(user, now)

    def get_profiles(self, search: Optional[str] = None) -> list[User]:
        return self.repo.get_users(self.db, search)

    def _get_user(self, user_id: int) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise NotFound("Profile not found")
        return user

    def activate(self, admin: User, user_id: int, now: Optional[datetime] = None) -> User:
        """Mark a subscription active after a payment was received"""
        user = self._get_user(user_id)
        self.repo.update_subscription(
            self.db, user, subscription_status="active", last_payment_date=now or datetime.utcnow()
        )
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"✅ Admin {admin.email} activated subscription for {user.email}")
        return user

    def block(self, admin: User, user_id: int, confirm: bool = False) -> User:
        if not confirm:
            raise ValidationFailed("Blocking an account cuts off its access; confirm to proceed")
        user = self._get_user(user_id)
        self.repo.update_subscription(self.db, user, subscription_status="cancelled")
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"🚫 Admin {admin.email} blocked {user.email}")
        return user
