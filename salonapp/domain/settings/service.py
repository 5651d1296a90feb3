"""Settings service - business settings and operator profile"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...config import FRONTEND_URL
from ...models import User
from .schemas import BusinessSettings, ProfileResponse, ProfileUpdate

logger = logging.getLogger(__name__)


def _merge(defaults: dict, stored: dict) -> dict:
    """Overlay stored values on the defaults, keeping only known keys"""
    merged = {}
    for key, default in defaults.items():
        value = stored.get(key, default) if isinstance(stored, dict) else default
        if isinstance(default, dict):
            merged[key] = _merge(default, value if isinstance(value, dict) else {})
        else:
            merged[key] = value
    return merged


def load_business_settings(stored: Optional[dict]) -> BusinessSettings:
    """Stored settings merged over the defaults"""
    defaults = BusinessSettings().model_dump()
    return BusinessSettings.model_validate(_merge(defaults, stored or {}))


def booking_url(user: User) -> str:
    return f"{FRONTEND_URL.rstrip('/')}/agendar/{user.public_id}"


class SettingsService:
    """Service layer for business settings and the operator profile"""

    def __init__(self, db: Session):
        self.db = db

    def get_settings(self, user: User) -> BusinessSettings:
        return load_business_settings(user.settings)

    def update_settings(self, data: BusinessSettings, user: User) -> BusinessSettings:
        """Replace the stored settings with a validated full document"""
        user.settings = data.model_dump()
        self.db.commit()
        self.db.refresh(user)
        logger.info(
            f"✅ Settings updated for user {user.id} "
            f"(online booking {'on' if data.onlineBooking.active else 'off'})"
        )
        return load_business_settings(user.settings)

    def get_profile(self, user: User) -> ProfileResponse:
        return ProfileResponse(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            salon_name=user.salon_name,
            whatsapp=user.whatsapp,
            address=user.address,
            logo_url=user.logo_url,
            public_id=user.public_id,
            booking_url=booking_url(user),
            subscription_status=user.subscription_status,
            trial_ends_at=user.trial_ends_at,
        )

    def update_profile(self, data: ProfileUpdate, user: User) -> ProfileResponse:
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"✅ Profile updated for user {user.id}")
        return self.get_profile(user)
