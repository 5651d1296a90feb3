"""Billing router - account, subscription status and admin endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import User
from .schemas import AccountResponse, BlockRequest, SubscriptionStatusResponse
from .subscription_service import SubscriptionService

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
router = APIRouter(prefix="/billing", tags=["Billing"])
admin_router = APIRouter(prefix="/admin", tags=["Admin"])


def get_subscription_service(db: Session = Depends(get_db)) -> SubscriptionService:
    """Dependency injection for SubscriptionService"""
    return SubscriptionService(db)


@auth_router.get("/me", response_model=AccountResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Current operator. Registers the profile (with a trial) on first call."""
    return user


@router.get("/status", response_model=SubscriptionStatusResponse)
async def get_subscription_status(
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Trial / subscription state; reachable even when access is blocked"""
    return service.get_status(user)


# ============================================================================
# ADMIN
# ============================================================================


@admin_router.get("/profiles", response_model=list[AccountResponse])
async def get_profiles(
    search: Optional[str] = Query(None),
    admin: User = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.get_profiles(search)


@admin_router.post("/profiles/{user_id}/activate", response_model=AccountResponse)
async def activate_profile(
    user_id: int,
    admin: User = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Activate a subscription once payment is received"""
    return service.activate(admin, user_id)


@admin_router.post("/profiles/{user_id}/block", response_model=AccountResponse)
async def block_profile(
    user_id: int,
    data: BlockRequest,
    admin: User = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.block(admin, user_id, data.confirm)
