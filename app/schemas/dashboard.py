"""
Dashboard view model
"""

from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.order import OrderListItem

class DashboardSummary(CamelModel):
    """Statistics cards and recent orders table of the dashboard"""
    total_clients: int = 0
    active_orders: int = 0
    current_month_orders: int = 0
    current_month_revenue: float = 0
    recent_orders: list[OrderListItem] = Field(default_factory=list)
