"""
Product Models

Pydantic models for product data validation.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .shop import require_text
from ..storage.statements import MAX_INTEGER, MIN_INTEGER


class ProductBase(BaseModel):
    """Base product model."""
    shop_id: int
    name: str
    description: Optional[str] = ''
    price: float
    stock: int = 0


class ProductCreate(ProductBase):
    """Model for creating a product."""
    shop_id: int = Field(..., ge=MIN_INTEGER, le=MAX_INTEGER, description="Owning shop ID")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field('', description="Free-form description")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price")
    stock: int = Field(0, ge=0, le=MAX_INTEGER, description="Units in stock")

    @field_validator('name')
    @classmethod
    def check_name(cls, value: str) -> str:
        return require_text(value)

    @field_validator('description')
    @classmethod
    def default_description(cls, value: Optional[str]) -> str:
        return value or ''


class Product(ProductBase):
    """Full product model."""
    id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True
