"""Inventory catalog schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class InventoryLocationCreate(BaseModel):
    """Create an inventory location."""

    name: str = Field(..., min_length=1, max_length=255)
    location_type: str | None = Field(None, max_length=50)
    notes: str | None = None


class InventoryLocationResponse(BaseModel):
    """Inventory location response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location_type: str | None
    notes: str | None


class InventoryItemCreate(BaseModel):
    """Create an inventory item."""

    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    category: str | None = Field(None, max_length=100)
    quantity: int = Field(0, ge=0)
    minimum_quantity: int = Field(0, ge=0)
    location_id: int | None = None
    external_id: str | None = Field(None, max_length=100)
    supplier: str | None = Field(None, max_length=255)
    supplier_link: str | None = Field(None, max_length=500)
    notes: str | None = None
    is_active: bool = True


class InventoryItemUpdate(BaseModel):
    """Update an inventory item."""

    name: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = None
    quantity: int | None = Field(None, ge=0)
    minimum_quantity: int | None = Field(None, ge=0)
    location_id: int | None = None
    supplier: str | None = None
    supplier_link: str | None = None
    notes: str | None = None
    is_active: bool | None = None


class InventoryItemResponse(BaseModel):
    """Inventory item response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str | None
    quantity: int
    minimum_quantity: int
    location_id: int | None
    external_id: str | None
    supplier: str | None
    supplier_link: str | None
    notes: str | None
    is_active: bool
    is_low: bool
    created_at: datetime
    updated_at: datetime
