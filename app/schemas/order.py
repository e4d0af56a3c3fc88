"""
Pydantic schemas for Order and OrderItem operations
"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import date, datetime
from enum import Enum

from app.schemas.base import CamelModel

class OrderStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "InProgress"
    READY_FOR_DELIVERY = "ReadyForDelivery"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

class PaymentStatus(str, Enum):
    UNPAID = "Unpaid"
    PARTIAL = "Partial"
    PAID = "Paid"

ACTIVE_STATUSES = (OrderStatus.NEW.value, OrderStatus.IN_PROGRESS.value)

class OrderItem(CamelModel):
    """Line item as returned by the CRM API; numeric fields may be missing"""
    id: Optional[int] = None
    order_id: Optional[int] = None
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    unit_price: Optional[float] = None
    description: Optional[str] = None
    subtotal: Optional[float] = None

class OrderItemInput(CamelModel):
    """Line item row of the order form"""
    product_id: int = Field(..., description="Product being ordered")
    quantity: int = Field(1, description="Quantity ordered")
    unit_price: float = Field(..., description="Unit price at the time of the order")
    description: Optional[str] = Field(None, description="Optional description override")

    @field_validator('product_id')
    @classmethod
    def validate_product(cls, v):
        if not v:
            raise ValueError('Product is required')
        return v

    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v):
        if v <= 0:
            raise ValueError('Quantity must be greater than 0')
        return v

    @field_validator('unit_price')
    @classmethod
    def validate_unit_price(cls, v):
        if v <= 0:
            raise ValueError('Unit price must be greater than 0')
        return v

class OrderItemCreate(OrderItemInput):
    """Schema for adding a single line item to an existing order"""
    order_id: int = Field(..., description="Order the item belongs to")

class OrderCreate(CamelModel):
    """Schema for the create-order form"""
    client_id: int = Field(..., description="Client placing the order")
    order_date: date = Field(..., description="Order date")
    due_date: date = Field(..., description="Due date")
    status: OrderStatus = Field(OrderStatus.NEW, description="Order status")
    payment_status: PaymentStatus = Field(PaymentStatus.UNPAID, description="Payment status")
    notes: Optional[str] = Field("", description="Additional notes")
    order_items: list[OrderItemInput] = Field(default_factory=list, description="Line items")

    @field_validator('client_id')
    @classmethod
    def validate_client(cls, v):
        if not v:
            raise ValueError('Client is required')
        return v

class OrderUpdate(OrderCreate):
    """Schema for the edit-order form; the existing order number is kept"""
    order_number: Optional[str] = Field(None, max_length=50)

class Order(CamelModel):
    """Canonical order shape handed to the derivation core"""
    id: int
    client_id: Optional[int] = None
    order_number: str = ""
    order_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    status: Optional[str] = None
    payment_status: Optional[str] = None
    notes: Optional[str] = None
    total_amount: Optional[float] = None
    amount_paid: Optional[float] = 0
    created_by_user_id: Optional[int] = None
    order_items: list[OrderItem] = Field(default_factory=list)

class OrderListItem(Order):
    """Order row of the list views: client name and the total to show"""
    client_name: str
    display_total: float = 0

class OrderItemLine(OrderItem):
    """Line item of the order detail page"""
    line_total: float = 0

class OrderDetail(Order):
    """Order detail page"""
    client_name: str
    display_total: float
    balance_due: float
    order_items: list[OrderItemLine] = Field(default_factory=list)
