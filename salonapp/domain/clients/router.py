"""Client router - FastAPI endpoints for client operations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user_with_subscription
from ...database import get_db
from ...models import User
from .schemas import ClientCreate, ClientQuickCreate, ClientResponse, ClientUpdate
from .service import ClientService

router = APIRouter(prefix="/clients", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


@router.get("", response_model=list[ClientResponse])
async def get_clients(
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user_with_subscription),
    service: ClientService = Depends(get_client_service),
):
    """Get all clients for the current user, ordered by name"""
    return service.get_clients(current_user, search)


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: ClientService = Depends(get_client_service),
):
    return service.create_client(data, current_user)


@router.post("/quick", response_model=ClientResponse, status_code=201)
async def quick_add_client(
    data: ClientQuickCreate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: ClientService = Depends(get_client_service),
):
    """Quick-add a client (name and phone) while booking"""
    return service.quick_add_client(data, current_user)


@router.get("/birthdays", response_model=list[ClientResponse])
async def get_birthdays(
    current_user: User = Depends(get_current_user_with_subscription),
    service: ClientService = Depends(get_client_service),
):
    """Clients with a birthday today"""
    return service.get_birthdays(current_user)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    current_user: User = Depends(get_current_user_with_subscription),
    service: ClientService = Depends(get_client_service),
):
    return service.get_client(client_id, current_user)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    current_user: User = Depends(get_current_user_with_subscription),
    service: ClientService = Depends(get_client_service),
):
    return service.update_client(client_id, data, current_user)
