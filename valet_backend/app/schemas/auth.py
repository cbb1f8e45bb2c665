"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from valet_backend.app.models.enums import UserRole
from valet_backend.app.schemas.location import LocationSummary


class LoginRequest(BaseModel):
    """
    Schema for staff login.

    login_id may be a user_id, an email address or a phone number.
    Presence is checked by the endpoint so the error message stays uniform.
    """
    login_id: Optional[str] = Field(default=None, description="user_id, email_id or phone_number")
    password: Optional[str] = Field(default=None, description="Password")


class LoginResponse(BaseModel):
    success: bool = True
    user_id: str
    name: str
    role: UserRole
    role_id: int
    token: str


class CurrentUser(BaseModel):
    user_id: str
    name: str
    email_id: Optional[str] = None
    phone_number: Optional[str] = None
    role_name: UserRole
    role: UserRole
    role_id: int


class CurrentUserData(BaseModel):
    user: CurrentUser
    accessibleLocations: List[LocationSummary]


class CurrentUserResponse(BaseModel):
    """
    Schema for GET /auth/me.

    Returns the live principal and the locations it can currently access.
    """
    success: bool = True
    data: CurrentUserData
