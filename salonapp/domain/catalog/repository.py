"""Catalog repository - professionals and salon services"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Professional, Service


class ProfessionalRepository:
    @staticmethod
    def get_professionals(db: Session, user_id: int, search: Optional[str] = None) -> list[Professional]:
        query = db.query(Professional).filter(Professional.user_id == user_id)
        if search:
            term = f"%{search.strip()}%"
            query = query.filter(or_(Professional.name.ilike(term), Professional.email.ilike(term)))
        return query.order_by(Professional.name).all()

    @staticmethod
    def get_professional_by_id(db: Session, professional_id: int, user_id: int) -> Optional[Professional]:
        return (
            db.query(Professional)
            .filter(Professional.id == professional_id, Professional.user_id == user_id)
            .first()
        )

    @staticmethod
    def create_professional(db: Session, user_id: int, **data) -> Professional:
        professional = Professional(user_id=user_id, **data)
        db.add(professional)
        db.flush()
        return professional

    @staticmethod
    def count(db: Session, user_id: int) -> int:
        return db.query(Professional).filter(Professional.user_id == user_id).count()


class ServiceRepository:
    @staticmethod
    def get_services(db: Session, user_id: int, search: Optional[str] = None) -> list[Service]:
        query = db.query(Service).filter(Service.user_id == user_id)
        if search:
            query = query.filter(Service.name.ilike(f"%{search.strip()}%"))
        return query.order_by(Service.name).all()

    @staticmethod
    def get_service_by_id(db: Session, service_id: int, user_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id, Service.user_id == user_id).first()

    @staticmethod
    def create_service(db: Session, user_id: int, **data) -> Service:
        service = Service(user_id=user_id, **data)
        db.add(service)
        db.flush()
        return service

    @staticmethod
    def count(db: Session, user_id: int) -> int:
        return db.query(Service).filter(Service.user_id == user_id).count()


def apply_updates(db: Session, record, **updates):
    for key, value in updates.items():
        if hasattr(record, key):
            setattr(record, key, value)
    db.flush()
    return record
