"""
Client management endpoints
"""

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from typing import Optional
import asyncio
import logging

from app.config import RATE_LIMIT_ENABLED
from app.core.aggregation import count_orders_per_client, orders_for_client
from app.core.filters import search
from app.core.lookup import enrich_with_client_names
from app.schemas.client import Client, ClientCreate, ClientDetail, ClientUpdate, ClientWithOrderCount
from app.schemas.user import UserProfile
from app.services.crm_api import CrmApiClient, get_api_client
from app.auth.auth_handler import get_current_user
from app.utils.error_handler import BoundaryError

logger = logging.getLogger(__name__)
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

router = APIRouter()

CLIENT_SEARCH_FIELDS = ("company_name", "contact_name", "email")

@router.get("/", response_model=list[ClientWithOrderCount])
@limiter.limit("30/minute")
async def list_clients(
    request: Request,
    search_term: Optional[str] = Query(None, alias="search", description="Search company, contact or email"),
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Clients with their order counts, optionally searched"""
    clients = await api_client.list_clients()
    try:
        orders = await api_client.list_orders()
    except BoundaryError as e:
        # The list is still useful without counts
        logger.error(f"Error fetching orders for client counts: {e.message}")
        orders = []
    counts = count_orders_per_client(clients, orders)

    rows = [
        ClientWithOrderCount(**client.model_dump(), order_count=counts.get(client.id, 0))
        for client in clients
    ]
    return search(rows, search_term, CLIENT_SEARCH_FIELDS)

@router.get("/{client_id}", response_model=ClientDetail)
@limiter.limit("30/minute")
async def get_client(
    request: Request,
    client_id: int,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Client details with the orders that really belong to the client"""
    client, orders = await asyncio.gather(
        api_client.get_client(client_id),
        api_client.list_orders_by_client(client_id),
    )
    rows = enrich_with_client_names(orders_for_client(client_id, orders), [client])
    return ClientDetail(**client.model_dump(), orders=rows)

@router.post("/", response_model=Client, status_code=201)
@limiter.limit("10/minute")
async def create_client(
    request: Request,
    client: ClientCreate,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Create a new client"""
    created = await api_client.create_client(client.model_dump(by_alias=True))
    logger.info(f"Created client with ID: {created.id}")
    return created

@router.put("/{client_id}")
@limiter.limit("10/minute")
async def update_client(
    request: Request,
    client_id: int,
    client_update: ClientUpdate,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Update an existing client"""
    result = await api_client.update_client(client_id, client_update.model_dump(by_alias=True))
    logger.info(f"Updated client with ID: {client_id}")
    return result

@router.delete("/{client_id}")
@limiter.limit("10/minute")
async def delete_client(
    request: Request,
    client_id: int,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Delete a client"""
    await api_client.delete_client(client_id)
    logger.info(f"Deleted client with ID: {client_id}")
    return {"message": "Client deleted successfully"}
