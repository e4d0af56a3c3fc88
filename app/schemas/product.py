"""
Pydantic schemas for Product operations
"""

from pydantic import Field
from typing import Optional

from app.schemas.base import CamelModel

class ProductBase(CamelModel):
    """Base product schema"""
    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    price: float = Field(0, ge=0, description="Current catalog price")
    description: Optional[str] = Field(None, description="Product description")
    is_active: bool = Field(True, description="Inactive products cannot be added to new orders")

class ProductCreate(ProductBase):
    """Schema for creating a product"""
    pass

class Product(ProductBase):
    """Product record as returned by the CRM API"""
    id: int
