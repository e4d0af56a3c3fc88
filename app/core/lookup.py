"""
Client name resolution for order records
"""

from typing import Any, Iterable

from app.core.fields import coerce_id, field_value
from app.core.totals import display_total
from app.schemas.order import OrderListItem

UNKNOWN_CLIENT = "Unknown Client"

def resolve_client_name(client_id: Any, clients: Iterable[Any]) -> str:
    """Company name of the client with the given id, or "Unknown Client" """
    wanted = coerce_id(client_id)
    if wanted is None:
        return UNKNOWN_CLIENT
    for client in clients:
        if coerce_id(field_value(client, "id")) == wanted:
            return field_value(client, "company_name") or UNKNOWN_CLIENT
    return UNKNOWN_CLIENT

def enrich_with_client_names(orders: Iterable[Any], clients: Iterable[Any]) -> list[OrderListItem]:
    """List rows: each order joined with its client's company name and its display total"""
    clients = list(clients)
    return [
        OrderListItem(
            **order.model_dump(),
            client_name=resolve_client_name(order.client_id, clients),
            display_total=display_total(order),
        )
        for order in orders
    ]
