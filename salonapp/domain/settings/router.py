"""Settings router - business settings and profile endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user_with_subscription
from ...database import get_db
from ...models import User
from .schemas import BusinessSettings, ProfileResponse, ProfileUpdate
from .service import SettingsService

router = APIRouter(prefix="/settings", tags=["Settings"])


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    """Dependency injection for SettingsService"""
    return SettingsService(db)


@router.get("", response_model=BusinessSettings)
async def get_settings(
    current_user: User = Depends(get_current_user_with_subscription),
    service: SettingsService = Depends(get_settings_service),
):
    """Business settings with defaults filled in"""
    return service.get_settings(current_user)


@router.put("", response_model=BusinessSettings)
async def update_settings(
    data: BusinessSettings,
    current_user: User = Depends(get_current_user_with_subscription),
    service: SettingsService = Depends(get_settings_service),
):
    return service.update_settings(data, current_user)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_user_with_subscription),
    service: SettingsService = Depends(get_settings_service),
):
    """Salon profile, including the public booking link"""
    return service.get_profile(current_user)


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: SettingsService = Depends(get_settings_service),
):
    return service.update_profile(data, current_user)
