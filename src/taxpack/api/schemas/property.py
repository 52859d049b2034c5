"""Pydantic schemas for property endpoints."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from taxpack.domain.models.enums import PropertyType, PropertyStatus


class PropertyCreateRequest(BaseModel):
    """Request schema for creating a property."""

    name: str = Field(..., min_length=1, max_length=255, description="Unique property name")
    purchase_price: Decimal = Field(..., ge=0)
    purchase_date: date
    property_type: PropertyType = PropertyType.HOUSE
    current_value: Optional[Decimal] = Field(default=None, ge=0)
    status: PropertyStatus = PropertyStatus.STABILIZED


class PropertyUpdateRequest(BaseModel):
    """Request schema for editing a property's status, value, name or type."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    property_type: Optional[PropertyType] = None
    current_value: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[PropertyStatus] = None


class PropertyResponse(BaseModel):
    """Response schema for a single property."""

    model_config = {"from_attributes": True}

    property_id: str
    name: str
    purchase_price: Decimal
    purchase_date: date
    property_type: PropertyType
    current_value: Optional[Decimal] = None
    status: PropertyStatus
    created_at: Optional[datetime] = None


class PropertyListResponse(BaseModel):
    """Response schema for listing properties."""

    properties: list[PropertyResponse]
    count: int
