"""Pydantic schemas for export endpoints."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class DateRangeResponse(BaseModel):
    """A selectable export period."""

    model_config = {"from_attributes": True}

    option_id: str
    label: str
    start_date: date
    end_date: date
    filename: str


class DateRangeListResponse(BaseModel):
    """Preset periods plus the last one the user picked."""

    options: list[DateRangeResponse]
    last_selection: str


class ExportRequest(BaseModel):
    """Which period to export; custom dates only for selection="custom"."""

    selection: str = Field(default="all-time")
    custom_start: Optional[str] = None
    custom_end: Optional[str] = None


class ExportResultResponse(BaseModel):
    """Outcome of an export that did not produce an archive."""

    model_config = {"from_attributes": True}

    success: bool
    message: str
    total_count: Optional[int] = None
    receipt_count: Optional[int] = None
    failed_properties: list[str] = Field(default_factory=list)
