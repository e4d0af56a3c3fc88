"""
Pydantic schemas for Client operations
"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime

from app.schemas.base import CamelModel, validate_email_format
from app.schemas.order import OrderListItem

class ClientBase(CamelModel):
    """Base client schema"""
    company_name: str = Field(..., max_length=200, description="Company name")
    contact_name: str = Field(..., max_length=200, description="Primary contact person")
    email: Optional[str] = Field(None, max_length=255, description="Contact email")
    phone: Optional[str] = Field(None, max_length=50, description="Contact phone")
    address: Optional[str] = Field(None, description="Street address")
    notes: Optional[str] = Field(None, description="Free-form notes")

class ClientCreate(ClientBase):
    """Schema for the add-client form"""

    @field_validator('company_name')
    @classmethod
    def validate_company_name(cls, v):
        if not v.strip():
            raise ValueError('Company name is required')
        return v

    @field_validator('contact_name')
    @classmethod
    def validate_contact_name(cls, v):
        if not v.strip():
            raise ValueError('Contact name is required')
        return v

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return validate_email_format(v)

class ClientUpdate(ClientCreate):
    """Schema for the edit-client form (the whole form is resubmitted)"""
    pass

class Client(ClientBase):
    """Client record as returned by the CRM API"""
    id: int
    created_at: Optional[datetime] = None

class ClientWithOrderCount(Client):
    """Row of the clients list"""
    order_count: int = 0

class ClientDetail(Client):
    """Client detail page: the record and its order history"""
    orders: list[OrderListItem] = Field(default_factory=list)
