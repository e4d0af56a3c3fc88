"""
Dashboard endpoint
"""

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from datetime import datetime
import asyncio
import logging

from app.config import RATE_LIMIT_ENABLED, RECENT_ORDERS_LIMIT
from app.core.dashboard import summarize
from app.schemas.dashboard import DashboardSummary
from app.schemas.user import UserProfile
from app.services.crm_api import CrmApiClient, get_api_client
from app.auth.auth_handler import get_current_user
from app.utils.error_handler import BoundaryError

logger = logging.getLogger(__name__)
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

router = APIRouter()

def get_now() -> datetime:
    """Current local time; the dashboard month is taken in this timezone"""
    return datetime.now().astimezone()

async def _lookup_company_names(api_client: CrmApiClient, client_ids: set) -> dict:
    """Company name per client id; ids the API cannot resolve are left out"""
    async def lookup(client_id):
        try:
            client = await api_client.get_client(client_id)
            return client_id, client.company_name
        except BoundaryError as e:
            logger.warning(f"Could not resolve client {client_id}: {e.message}")
            return client_id, None

    results = await asyncio.gather(*(lookup(client_id) for client_id in client_ids))
    return {client_id: name for client_id, name in results if name}

@router.get("/", response_model=DashboardSummary)
@limiter.limit("30/minute")
async def get_dashboard(
    request: Request,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client),
    now: datetime = Depends(get_now)
):
    """Statistics cards and the most recent orders"""
    clients, orders = await asyncio.gather(api_client.list_clients(), api_client.list_orders())

    recent_client_ids = {
        order.client_id for order in orders[:RECENT_ORDERS_LIMIT] if order.client_id is not None
    }
    names = await _lookup_company_names(api_client, recent_client_ids)

    return summarize(clients, orders, now, resolve_client_name=names.get)
