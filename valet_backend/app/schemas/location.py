"""
Location Pydantic schemas.

Defines request and response models for location management.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Any, Optional, List


class LocationCreate(BaseModel):
    """
    Schema for creating a location.

    Required fields are enforced by the service so that missing fields
    produce a single message.
    """
    location_name: Optional[str] = Field(None, max_length=200)
    location_short_code: Optional[str] = Field(None, description="Exactly 3 characters, stored uppercase")
    location_type: Optional[str] = Field(None, max_length=50, description="MALL, HOTEL, OTHER or a custom type")
    address: Optional[str] = Field(None, max_length=500)
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    status: Optional[bool] = True


class LocationStatusUpdate(BaseModel):
    """Schema for enabling or disabling a location; status must be a JSON boolean."""
    status: Any = None


class LocationResponse(BaseModel):
    location_id: str
    location_name: str
    location_short_code: str
    location_type: str
    address: Optional[str] = None
    valid_from: date
    valid_to: Optional[date] = None
    status: bool
    created_at: datetime

    class Config:
        from_attributes = True


class LocationSummary(BaseModel):
    """Subset of a location returned with access scopes."""
    location_id: str
    location_name: str
    location_type: str
    address: Optional[str] = None
    status: bool

    class Config:
        from_attributes = True


class LocationEnvelope(BaseModel):
    success: bool = True
    message: str
    data: LocationResponse


class LocationListResponse(BaseModel):
    success: bool = True
    data: List[LocationResponse]
