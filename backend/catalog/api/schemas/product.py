"""Pydantic models describing Product payloads.

Wire keys are camelCase (``stockQuantity``, ``isActive`` ...); snake_case field
names are accepted on input as well.
"""

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer
from pydantic.alias_generators import to_camel

CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class ProductCreate(BaseModel):
    """Payload for creating a product. ``isAvailable`` is always set by the server."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category: str = Field(..., min_length=1, max_length=100)
    stock_quantity: int = Field(..., ge=0)
    sku: str = Field(..., min_length=1, max_length=64, description="Unique SKU")
    is_active: bool | None = Field(None, description="Defaults to true")

    model_config = CAMEL_CONFIG


class ProductUpdate(BaseModel):
    """Payload for updating a product.

    name, description, price, category and stockQuantity replace the stored
    values on every update. sku, isActive and isAvailable are applied only
    when supplied.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category: str = Field(..., min_length=1, max_length=100)
    stock_quantity: int = Field(..., ge=0)
    sku: str | None = Field(None, max_length=64)
    is_active: bool | None = None
    is_available: bool | None = None

    model_config = CAMEL_CONFIG


class ProductRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    category: str
    stock_quantity: int
    sku: str
    is_active: bool
    is_available: bool
    created_at: datetime
    updated_at: datetime | None = None

    @field_serializer("price")
    def serialize_price(self, value: Decimal) -> float:
        return float(value)

    @field_serializer("created_at", "updated_at")
    def serialize_timestamps(self, value: datetime | None) -> str | None:
        """Convert datetime to ISO format string, reading naive values as UTC."""
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()

    model_config = {**CAMEL_CONFIG, "from_attributes": True}


class ProductFilters(BaseModel):
    """Conjunctive list filters plus optional paging."""

    category: str | None = None
    name: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    page: int | None = Field(None, ge=1, description="Page number (1-indexed)")
    page_size: int = Field(50, ge=1, le=500, description="Items per page")

    model_config = CAMEL_CONFIG
