"""
Product catalog endpoints used by the order form
"""

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
import logging

from app.config import RATE_LIMIT_ENABLED
from app.core.filters import filter_exact
from app.schemas.product import Product
from app.schemas.user import UserProfile
from app.services.crm_api import CrmApiClient, get_api_client
from app.auth.auth_handler import get_current_user

logger = logging.getLogger(__name__)
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

router = APIRouter()

@router.get("/", response_model=list[Product])
@limiter.limit("30/minute")
async def list_products(
    request: Request,
    active_only: bool = Query(True, description="Only products that can go on a new order"),
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Products for the order form; inactive ones are hidden unless asked for"""
    if not active_only:
        return await api_client.list_products()
    products = await api_client.list_active_products()
    # The isActive query parameter is not relied upon
    return filter_exact(products, "is_active", True)

@router.get("/{product_id}", response_model=Product)
@limiter.limit("30/minute")
async def get_product(
    request: Request,
    product_id: int,
    current_user: UserProfile = Depends(get_current_user),
    api_client: CrmApiClient = Depends(get_api_client)
):
    """Get a product by ID"""
    return await api_client.get_product(product_id)
