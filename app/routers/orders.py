"""
Order management endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from typing import Optional
import asyncio
import logging

from app.config import RATE_LIMIT_ENABLED
from app.core.filters import apply_filters, ALL_STATUSES
from app.core.lookup import enrich_with_client_names, UNKNOWN_CLIENT
from app.core.totals import balance_due, display_total, line_total
from app.schemas.order import (
    Order, OrderCreate, OrderUpdate, OrderDetail, OrderItem, OrderItemLine, OrderListItem
)
from app.schemas.user import UserProfile
from app.services.crm_api import CrmApiClient, get_api_client
from app.services.order_builder import build_order_payload
from app.auth.auth_handler import get_current_user
from app.utils.error_handler import BoundaryError

logger = logging.getLogger(__name__)
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

router = APIRouter()

ORDER_SEARCH_FIELDS = ("order_number", "client_name")

def _items_failure(error: BoundaryError, action: str) -> HTTPException:
    """The order was saved but the API rejected its line items"""
    return HTTPException(
        status_code=502,
        detail=f"Order was {action} but there was an issue with order items: {error.message}"
    )

def build_order_detail(order: Order, client_name: str) -> OrderDetail:
    data = order.model_dump()
    data["order_items"] = [
        OrderItemLine(**item.model_dump(), line_total=line_total(item)) for item in order.order_items
    ]
    return OrderDetail(
        **data,
        client_name=client_name,
        display_total=display_total(order),
        balance_due=balance_due(order),
    )

@router.get("/", response_model=list[OrderListItem])
@limiter.limit("30/minute")
async def list_orders(
    request: Request,
    search_term: Optional[str] = Query(None, alias="search", description="Search order number or client name"),
    status: str = Query(ALL_STATUSES, description="Exact status, or 'All Statuses'"),
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Orders with their client names, searched and filtered by status"""
    orders, clients = await asyncio.gather(api_client.list_orders(), api_client.list_clients())
    rows = enrich_with_client_names(orders, clients)
    return apply_filters(
        rows, search_term, ORDER_SEARCH_FIELDS,
        field="status", selector=status, all_value=ALL_STATUSES
    )

@router.get("/{order_id}", response_model=OrderDetail)
@limiter.limit("30/minute")
async def get_order(
    request: Request,
    order_id: int,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Get a specific order by ID"""
    order = await api_client.get_order(order_id)

    client_name = UNKNOWN_CLIENT
    if order.client_id:
        try:
            client = await api_client.get_client(order.client_id)
            client_name = client.company_name or UNKNOWN_CLIENT
        except BoundaryError as e:
            # The order is still worth showing
            logger.error(f"Error fetching client {order.client_id} for order {order_id}: {e.message}")

    return build_order_detail(order, client_name)

@router.get("/{order_id}/items", response_model=list[OrderItem])
@limiter.limit("30/minute")
async def get_order_items(
    request: Request,
    order_id: int,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Line items of an order"""
    return await api_client.get_order_items(order_id)

@router.post("/", response_model=Order, status_code=201)
@limiter.limit("10/minute")
async def create_order(
    request: Request,
    order: OrderCreate,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Create a new order with a generated order number"""
    payload = build_order_payload(order, created_by_user_id=current_user.id)
    try:
        created = await api_client.create_order(payload)
    except BoundaryError as e:
        if "order item" in e.message.lower():
            raise _items_failure(e, "created")
        raise

    logger.info(f"Created order {payload['orderNumber']} with ID: {created.id}")
    return created

@router.put("/{order_id}")
@limiter.limit("10/minute")
async def update_order(
    request: Request,
    order_id: int,
    order_update: OrderUpdate,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Update an existing order, keeping its order number"""
    order_number = order_update.order_number
    if not order_number:
        existing = await api_client.get_order(order_id)
        order_number = existing.order_number

    payload = build_order_payload(
        order_update, created_by_user_id=current_user.id, existing_order_number=order_number
    )
    try:
        result = await api_client.update_order(order_id, payload)
    except BoundaryError as e:
        if "order item" in e.message.lower():
            raise _items_failure(e, "updated")
        raise

    logger.info(f"Updated order with ID: {order_id}")
    return result

@router.delete("/{order_id}")
@limiter.limit("10/minute")
async def delete_order(
    request: Request,
    order_id: int,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Delete an order"""
    await api_client.delete_order(order_id)
    logger.info(f"Deleted order with ID: {order_id}")
    return {"message": "Order deleted successfully"}
