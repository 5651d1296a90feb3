"""Client service - Business logic for client operations"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import NotFound, ValidationFailed
from ...models import Client, User
from .repository import ClientRepository
from .schemas import ClientCreate, ClientQuickCreate, ClientUpdate

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_clients(self, user: User, search: Optional[str] = None) -> list[Client]:
        return self.repo.get_clients(self.db, user.id, search)

    def get_client(self, client_id: int, user: User) -> Client:
        client = self.repo.get_client_by_id(self.db, client_id, user.id)
        if not client:
            raise NotFound("Client not found")
        return client

    def create_client(self, data: ClientCreate, user: User) -> Client:
        logger.info(f"📥 Creating client for user_id: {user.id}")
        client = self.repo.create_client(self.db, user.id, **data.model_dump())
        self.db.commit()
        self.db.refresh(client)
        return client

    def quick_add_client(self, data: ClientQuickCreate, user: User) -> Client:
        """Create a client from name and phone only"""
        logger.info(f"📥 Quick-adding client for user_id: {user.id}")
        client = self.repo.create_client(self.db, user.id, name=data.name, phone=data.phone)
        self.db.commit()
        self.db.refresh(client)
        return client

    def update_client(self, client_id: int, data: ClientUpdate, user: User) -> Client:
        client = self.get_client(client_id, user)
        updates = data.model_dump(exclude_unset=True)
        if "name" in updates and not updates["name"]:
            raise ValidationFailed("Name is required")
        self.repo.update_client(self.db, client, **updates)
        self.db.commit()
        self.db.refresh(client)
        return client

    def get_birthdays(self, user: User, today: Optional[date] = None) -> list[Client]:
        return self.repo.get_birthdays(self.db, user.id, today or date.today())

    def find_or_create_by_phone(self, user: User, name: str, phone: str) -> Client:
        """
        Reuse the first client with exactly this phone, else stage a new one.

        Does not commit: used inside the public booking unit of work.
        """
        client = self.repo.get_client_by_phone(self.db, user.id, phone)
        if client:
            logger.info(f"🔁 Reusing client {client.id} matched by phone")
            return client
        return self.repo.create_client(self.db, user.id, name=name, phone=phone)
