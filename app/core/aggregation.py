"""
Per-client order aggregation
"""

from typing import Any, Iterable

from app.core.fields import coerce_id, field_value

def count_orders_per_client(clients: Iterable[Any], orders: Iterable[Any]) -> dict[int, int]:
    """Number of orders per client id; clients without orders map to 0.

    Order client ids are normalized to int before matching because the CRM
    API does not reliably narrow results by its clientId query parameter and
    may hand back ids as strings.
    """
    counts = {}
    for client in clients:
        client_id = coerce_id(field_value(client, "id"))
        if client_id is not None:
            counts[client_id] = 0

    for order in orders:
        client_id = coerce_id(field_value(order, "client_id"))
        if client_id in counts:
            counts[client_id] += 1

    return counts

def orders_for_client(client_id: Any, orders: Iterable[Any]) -> list:
    """Orders that really belong to the given client, in their original sequence"""
    wanted = coerce_id(client_id)
    if wanted is None:
        return []
    return [order for order in orders if coerce_id(field_value(order, "client_id")) == wanted]
