"""
Assembly of order create/update payloads for the CRM API
"""

from datetime import date, datetime, time, timezone
from typing import Optional

from app.core.totals import calculate_total
from app.schemas.order import OrderCreate, OrderUpdate

def generate_order_number(now: Optional[datetime] = None) -> str:
    """ORD-YYYYMMDD-NNNNNN, NNNNNN being the last six digits of the epoch time in milliseconds"""
    now = now or datetime.now().astimezone()
    millis = str(int(now.timestamp() * 1000))
    return f"ORD-{now:%Y%m%d}-{millis[-6:]}"

def to_utc_midnight(value: Optional[date]) -> Optional[str]:
    """Calendar date as the ISO timestamp of midnight UTC, the format the API stores"""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    midnight = datetime.combine(value, time(0, 0), tzinfo=timezone.utc)
    return midnight.strftime("%Y-%m-%dT%H:%M:%S.000Z")

def build_item_payloads(order: OrderCreate) -> list[dict]:
    """Line items worth sending: product, quantity and price all set"""
    payloads = []
    for item in order.order_items:
        if not (item.product_id and item.quantity and item.unit_price):
            continue
        payload = {
            "productId": item.product_id,
            "quantity": item.quantity,
            "unitPrice": item.unit_price,
            "subtotal": item.quantity * item.unit_price,
        }
        if item.description:
            payload["description"] = item.description
        payloads.append(payload)
    return payloads

def build_order_payload(
    order: OrderCreate,
    created_by_user_id: Optional[int],
    existing_order_number: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    """Request body for POST/PUT /orders.

    A new order gets a generated order number; an edited one keeps the number
    it already has.
    """
    if isinstance(order, OrderUpdate) and not existing_order_number:
        existing_order_number = order.order_number

    return {
        "clientId": order.client_id,
        "orderNumber": existing_order_number or generate_order_number(now),
        "orderDate": to_utc_midnight(order.order_date),
        "dueDate": to_utc_midnight(order.due_date),
        "status": order.status.value,
        "paymentStatus": order.payment_status.value,
        "notes": order.notes or "",
        "totalAmount": calculate_total(order.order_items),
        "createdByUserId": created_by_user_id,
        "orderItems": build_item_payloads(order),
    }
