"""
Normalization of CRM API order payloads into the canonical Order shape
"""

import logging
from typing import Any

from app.core.fields import coerce_id
from app.schemas.order import Order

logger = logging.getLogger(__name__)

# Depending on the endpoint, line items arrive under any of these keys
ITEM_KEYS = ("items", "orderItems", "OrderItems", "order_items")

def extract_items(raw: dict) -> list:
    """First non-empty line item list found under the known keys"""
    for key in ITEM_KEYS:
        items = raw.get(key)
        if items:
            return list(items)
    return []

def normalize_order(raw: dict) -> Order:
    """Single place where upstream order payloads are turned into an Order"""
    data = {key: value for key, value in raw.items() if key not in ITEM_KEYS}
    data["orderItems"] = extract_items(raw)

    client_id = raw.get("clientId", raw.get("client_id"))
    data.pop("client_id", None)
    data["clientId"] = coerce_id(client_id)
    if client_id is not None and data["clientId"] is None:
        logger.warning(f"Order {raw.get('id')} has a non-numeric clientId: {client_id!r}")

    return Order(**data)

def normalize_orders(raw_orders: Any) -> list[Order]:
    if not isinstance(raw_orders, list):
        logger.warning(f"Expected a list of orders, got {type(raw_orders).__name__}")
        return []
    return [normalize_order(raw) for raw in raw_orders]
