"""
Owner Pydantic schemas.

Defines request and response models for owner account management.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from valet_backend.app.models.enums import UserRole


class OwnerCreate(BaseModel):
    """Schema for creating an owner assigned to one location."""
    name: Optional[str] = Field(None, max_length=150)
    email_id: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=20)
    password: Optional[str] = None
    location_id: Optional[str] = Field(None, max_length=20)


class OwnerResponse(BaseModel):
    user_id: str
    name: str
    email_id: str
    phone_number: str
    role_id: int

    class Config:
        from_attributes = True


class LocationAccessResponse(BaseModel):
    id: int
    user_id: str
    location_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class OwnerCreatedData(BaseModel):
    owner: OwnerResponse
    location_access: LocationAccessResponse


class OwnerCreatedResponse(BaseModel):
    success: bool = True
    message: str
    data: OwnerCreatedData


class OwnerListItem(BaseModel):
    user_id: str
    name: str
    email_id: str
    phone_number: str
    status: bool
    created_at: datetime
    role_name: UserRole
    location_count: int


class OwnerListResponse(BaseModel):
    success: bool = True
    data: List[OwnerListItem]
