"""Billing repository - operator accounts"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import User


class BillingRepository:
    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_users(db: Session, search: Optional[str] = None) -> list[User]:
        """All operator profiles, newest first, optionally filtered by name, email or salon"""
        query = db.query(User)
        if search:
            term = f"%{search.strip()}%"
            query = query.filter(
                or_(User.display_name.ilike(term), User.email.ilike(term), User.salon_name.ilike(term))
            )
        return query.order_by(User.created_at.desc(), User.id.desc()).all()

    @staticmethod
    def update_subscription(db: Session, user: User, **updates) -> User:
        for key, value in updates.items():
            setattr(user, key, value)
        db.flush()
        return user
