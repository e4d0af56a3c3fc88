"""
Pydantic schemas for user and session operations
"""

from pydantic import Field, ValidationInfo, field_validator
from typing import Optional

from app.schemas.base import CamelModel, EMAIL_PATTERN, validate_email_format

class UserProfile(CamelModel):
    """Profile snapshot kept in the session; never holds a password or token"""
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class LoginRequest(CamelModel):
    """Schema for the sign-in form"""
    email: str = Field(..., max_length=255, description="Email address")
    password: str = Field(..., description="Password")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Email is required')
        if not EMAIL_PATTERN.search(v):
            raise ValueError('Email is invalid')
        return v

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if not v:
            raise ValueError('Password is required')
        return v

class RegisterRequest(CamelModel):
    """Schema for the create-account form"""
    first_name: str = Field(..., max_length=100, description="First name")
    last_name: str = Field(..., max_length=100, description="Last name")
    email: str = Field(..., max_length=255, description="Email address")
    password: str = Field(..., max_length=255, description="Password (minimum 8 characters)")
    confirm_password: str = Field(..., description="Password confirmation")

    @field_validator('first_name')
    @classmethod
    def validate_first_name(cls, v):
        if not v:
            raise ValueError('First name is required')
        return v

    @field_validator('last_name')
    @classmethod
    def validate_last_name(cls, v):
        if not v:
            raise ValueError('Last name is required')
        return v

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if not v:
            raise ValueError('Email is required')
        return validate_email_format(v)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters long')
        return v

    @field_validator('confirm_password')
    @classmethod
    def passwords_match(cls, v, info: ValidationInfo):
        if not v:
            raise ValueError('Please confirm your password')
        if 'password' in info.data and v != info.data['password']:
            raise ValueError('Passwords do not match')
        return v

class UserCreate(CamelModel):
    """Payload sent to the CRM API to create a user"""
    email: str
    password: str
    first_name: str
    last_name: str

class UserUpdate(CamelModel):
    """Partial user update sent to the CRM API"""
    email: Optional[str] = None
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
