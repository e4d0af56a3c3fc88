"""
Line item endpoints for existing orders
"""

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
import logging

from app.config import RATE_LIMIT_ENABLED
from app.schemas.order import OrderItem, OrderItemCreate, OrderItemInput
from app.schemas.user import UserProfile
from app.services.crm_api import CrmApiClient, get_api_client
from app.auth.auth_handler import get_current_user

logger = logging.getLogger(__name__)
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

router = APIRouter()

def _item_payload(item: OrderItemInput) -> dict:
    payload = item.model_dump(by_alias=True, exclude_none=True)
    payload["subtotal"] = item.quantity * item.unit_price
    return payload

@router.post("/", response_model=OrderItem, status_code=201)
@limiter.limit("20/minute")
async def create_order_item(
    request: Request,
    item: OrderItemCreate,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Add a line item to an order"""
    created = await api_client.create_order_item(_item_payload(item))
    logger.info(f"Added item {created.id} to order {item.order_id}")
    return created

@router.put("/{item_id}")
@limiter.limit("20/minute")
async def update_order_item(
    request: Request,
    item_id: int,
    item: OrderItemInput,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Update a line item"""
    result = await api_client.update_order_item(item_id, _item_payload(item))
    logger.info(f"Updated order item with ID: {item_id}")
    return result

@router.delete("/{item_id}")
@limiter.limit("20/minute")
async def delete_order_item(
    request: Request,
    item_id: int,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Remove a line item"""
    await api_client.delete_order_item(item_id)
    logger.info(f"Deleted order item with ID: {item_id}")
    return {"message": "Order item deleted successfully"}
