"""Catalog service - professionals and salon services"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import NotFound
from ...models import Professional, Service, User
from .repository import ProfessionalRepository, ServiceRepository, apply_updates
from .schemas import ProfessionalCreate, ProfessionalUpdate, ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class ProfessionalService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfessionalRepository()

    def get_professionals(self, user: User, search: Optional[str] = None) -> list[Professional]:
        return self.repo.get_professionals(self.db, user.id, search)

    def get_professional(self, professional_id: int, user: User) -> Professional:
        professional = self.repo.get_professional_by_id(self.db, professional_id, user.id)
        if not professional:
            raise NotFound("Professional not found")
        return professional

    def create_professional(self, data: ProfessionalCreate, user: User) -> Professional:
        logger.info(f"📥 Creating professional for user_id: {user.id}")
        professional = self.repo.create_professional(self.db, user.id, **data.model_dump())
        self.db.commit()
        self.db.refresh(professional)
        return professional

    def update_professional(self, professional_id: int, data: ProfessionalUpdate, user: User) -> Professional:
        professional = self.get_professional(professional_id, user)
        apply_updates(self.db, professional, **data.model_dump(exclude_unset=True))
        self.db.commit()
        self.db.refresh(professional)
        return professional


class SalonServiceService:
    """Services offered by the salon (haircut, manicure...)"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def get_services(self, user: User, search: Optional[str] = None) -> list[Service]:
        return self.repo.get_services(self.db, user.id, search)

    def get_service(self, service_id: int, user: User) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id, user.id)
        if not service:
            raise NotFound("Service not found")
        return service

    def create_service(self, data: ServiceCreate, user: User) -> Service:
        logger.info(f"📥 Creating service '{data.name}' for user_id: {user.id}")
        service = self.repo.create_service(self.db, user.id, **data.model_dump())
        self.db.commit()
        self.db.refresh(service)
        return service

    def update_service(self, service_id: int, data: ServiceUpdate, user: User) -> Service:
        """Price changes apply to future bookings only"""
        service = self.get_service(service_id, user)
        apply_updates(self.db, service, **data.model_dump(exclude_unset=True))
        self.db.commit()
        self.db.refresh(service)
        return service
