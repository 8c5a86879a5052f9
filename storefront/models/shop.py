"""
Shop Models

Pydantic models for shop/tenant data validation.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

SUBDOMAIN_PATTERN = re.compile(r'[a-z0-9-]+')
EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')


def require_text(value: str) -> str:
    """Strip surrounding whitespace and reject empty text."""
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class ShopBase(BaseModel):
    """Base shop model."""
    name: str
    subdomain: str
    owner_email: str


class ShopCreate(ShopBase):
    """Model for creating a shop."""
    name: str = Field(..., description="Display name")
    subdomain: str = Field(..., description="Unique subdomain ([a-z0-9-])")
    owner_email: str = Field(..., description="Owner contact email")

    @field_validator('name')
    @classmethod
    def check_name(cls, value: str) -> str:
        return require_text(value)

    @field_validator('subdomain')
    @classmethod
    def check_subdomain(cls, value: str) -> str:
        if not SUBDOMAIN_PATTERN.fullmatch(value):
            raise ValueError("may only contain lowercase letters, digits and hyphens")
        return value

    @field_validator('owner_email')
    @classmethod
    def check_owner_email(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.fullmatch(value):
            raise ValueError("must be a valid email address")
        return value


class Shop(ShopBase):
    """Full shop model."""
    id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True
