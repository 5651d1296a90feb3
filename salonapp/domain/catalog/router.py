"""Catalog routers - professionals and salon services"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user_with_subscription
from ...database import get_db
from ...models import User
from .schemas import (
    ProfessionalCreate,
    ProfessionalResponse,
    ProfessionalUpdate,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
)
from .service import ProfessionalService, SalonServiceService

professionals_router = APIRouter(prefix="/professionals", tags=["Professionals"])
services_router = APIRouter(prefix="/services", tags=["Services"])


def get_professional_service(db: Session = Depends(get_db)) -> ProfessionalService:
    return ProfessionalService(db)


def get_salon_service_service(db: Session = Depends(get_db)) -> SalonServiceService:
    return SalonServiceService(db)


# ============================================================================
# PROFESSIONALS
# ============================================================================


@professionals_router.get("", response_model=list[ProfessionalResponse])
async def get_professionals(
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user_with_subscription),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.get_professionals(current_user, search)


@professionals_router.post("", response_model=ProfessionalResponse, status_code=201)
async def create_professional(
    data: ProfessionalCreate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.create_professional(data, current_user)


@professionals_router.get("/{professional_id}", response_model=ProfessionalResponse)
async def get_professional(
    professional_id: int,
    current_user: User = Depends(get_current_user_with_subscription),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.get_professional(professional_id, current_user)


@professionals_router.patch("/{professional_id}", response_model=ProfessionalResponse)
async def update_professional(
    professional_id: int,
    data: ProfessionalUpdate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.update_professional(professional_id, data, current_user)


# ============================================================================
# SERVICES
# ============================================================================


@services_router.get("", response_model=list[ServiceResponse])
async def get_services(
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user_with_subscription),
    service: SalonServiceService = Depends(get_salon_service_service),
):
    return service.get_services(current_user, search)


@services_router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: SalonServiceService = Depends(get_salon_service_service),
):
    return service.create_service(data, current_user)


@services_router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: int,
    current_user: User = Depends(get_current_user_with_subscription),
    service: SalonServiceService = Depends(get_salon_service_service),
):
    return service.get_service(service_id, current_user)


@services_router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: SalonServiceService = Depends(get_salon_service_service),
):
    return service.update_service(service_id, data, current_user)
