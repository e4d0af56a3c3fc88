"""
Dashboard statistics derived from the raw client and order lists
"""

from datetime import datetime
from typing import Callable, Optional, Sequence

from app.config import RECENT_ORDERS_LIMIT
from app.core.fields import number
from app.core import lookup
from app.core.totals import display_total
from app.schemas.client import Client
from app.schemas.dashboard import DashboardSummary
from app.schemas.order import ACTIVE_STATUSES, Order, OrderListItem

UNKNOWN = "Unknown"

ClientNameResolver = Callable[[Optional[int]], Optional[str]]

def is_active(order: Order) -> bool:
    return order.status in ACTIVE_STATUSES

def in_month_of(order: Order, now: datetime) -> bool:
    """True when the order date falls in the calendar month and year of `now`"""
    order_date = order.order_date
    if order_date is None:
        return False
    if order_date.tzinfo is not None and now.tzinfo is not None:
        order_date = order_date.astimezone(now.tzinfo)
    return order_date.year == now.year and order_date.month == now.month

def _snapshot_resolver(clients: Sequence[Client]) -> ClientNameResolver:
    def resolve(client_id):
        name = lookup.resolve_client_name(client_id, clients)
        return None if name == lookup.UNKNOWN_CLIENT else name
    return resolve

def summarize(
    clients: Sequence[Client],
    orders: Sequence[Order],
    now: datetime,
    resolve_client_name: Optional[ClientNameResolver] = None,
) -> DashboardSummary:
    """Build the dashboard view model.

    Recent orders are the first RECENT_ORDERS_LIMIT orders in the sequence the
    API returned them, not re-sorted. Client names come from the resolver,
    which the caller fills with whatever lookups it performed; without one the
    clients snapshot is used. Unresolved names become "Unknown".
    """
    resolver = resolve_client_name or _snapshot_resolver(clients)

    this_month = [order for order in orders if in_month_of(order, now)]

    recent_orders = [
        OrderListItem(
            **order.model_dump(),
            client_name=resolver(order.client_id) or UNKNOWN,
            display_total=display_total(order),
        )
        for order in orders[:RECENT_ORDERS_LIMIT]
    ]

    return DashboardSummary(
        total_clients=len(clients),
        active_orders=sum(1 for order in orders if is_active(order)),
        current_month_orders=len(this_month),
        current_month_revenue=sum((number(order.total_amount) for order in this_month), 0),
        recent_orders=recent_orders,
    )
