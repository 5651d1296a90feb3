"""Dashboard router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user_with_subscription
from ...database import get_db
from ...models import User
from .schemas import DashboardResponse
from .service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    current_user: User = Depends(get_current_user_with_subscription),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Today's agenda, catalog counts, monthly revenue, occupation and birthdays"""
    return service.get_dashboard(current_user)
