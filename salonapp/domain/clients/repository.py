"""Client repository - Database operations for clients"""

from datetime import date
from typing import Optional

from sqlalchemy import extract, or_
from sqlalchemy.orm import Session

from ...models import Client


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_clients(db: Session, user_id: int, search: Optional[str] = None) -> list[Client]:
        """Get all clients for a user, optionally filtered by name, email or phone"""
        query = db.query(Client).filter(Client.user_id == user_id)
        if search:
            term = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Client.name.ilike(term),
                    Client.email.ilike(term),
                    Client.phone.like(term),
                )
            )
        return query.order_by(Client.name).all()

    @staticmethod
    def get_client_by_id(db: Session, client_id: int, user_id: int) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id, Client.user_id == user_id).first()

    @staticmethod
    def get_client_by_phone(db: Session, user_id: int, phone: str) -> Optional[Client]:
        """First client whose phone equals the given string exactly"""
        return (
            db.query(Client)
            .filter(Client.user_id == user_id, Client.phone == phone)
            .order_by(Client.id)
            .first()
        )

    @staticmethod
    def create_client(db: Session, user_id: int, **client_data) -> Client:
        """Stage a new client; the caller commits"""
        client = Client(user_id=user_id, **client_data)
        db.add(client)
        db.flush()
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        for key, value in updates.items():
            if hasattr(client, key):
                setattr(client, key, value)
        db.flush()
        return client

    @staticmethod
    def get_birthdays(db: Session, user_id: int, today: date) -> list[Client]:
        """Clients whose birthday (month/day) falls on the given date"""
        return (
            db.query(Client)
            .filter(
                Client.user_id == user_id,
                Client.birth_date.isnot(None),
                extract("month", Client.birth_date) == today.month,
                extract("day", Client.birth_date) == today.day,
            )
            .order_by(Client.name)
            .all()
        )
