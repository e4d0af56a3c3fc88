"""
Order total calculation
"""

from typing import Any, Iterable

from app.core.fields import field_value, number

def line_total(item: Any) -> float:
    """quantity x unit price of one item; only strictly positive values count"""
    quantity = number(field_value(item, "quantity"))
    unit_price = number(field_value(item, "unit_price"))
    if quantity <= 0 or unit_price <= 0:
        return 0
    return quantity * unit_price

def calculate_total(items: Iterable[Any]) -> float:
    """Sum of the line totals; an empty list totals 0"""
    return sum((line_total(item) for item in items), 0)

def display_total(order: Any) -> float:
    """Total to show for an order.

    Computed from line items when the record carries them, otherwise the
    persisted totalAmount. List endpoints may omit items, so the two can
    disagree.
    """
    items = field_value(order, "order_items") or []
    if items:
        return calculate_total(items)
    return number(field_value(order, "total_amount"))

def balance_due(order: Any) -> float:
    return display_total(order) - number(field_value(order, "amount_paid"))
