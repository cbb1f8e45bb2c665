"""
Dashboard Pydantic schemas.

Aggregate counts per role, scoped by the caller's accessible locations.
"""

from pydantic import BaseModel
from typing import Optional, List
from valet_backend.app.models.enums import UserRole
from valet_backend.app.schemas.location import LocationResponse


class RoleCount(BaseModel):
    role_name: UserRole
    count: int


class AdminDashboard(BaseModel):
    locations: List[LocationResponse]
    userStats: List[RoleCount]
    totalTransactions: int


class OwnerDashboard(BaseModel):
    locations: List[LocationResponse]
    totalTransactions: int
    activeParkings: int


class ManagerDashboard(BaseModel):
    location: Optional[LocationResponse] = None
    totalTransactions: int
    activeParkings: int
    availableBlocks: int


class AdminDashboardResponse(BaseModel):
    success: bool = True
    data: AdminDashboard


class OwnerDashboardResponse(BaseModel):
    success: bool = True
    data: OwnerDashboard


class ManagerDashboardResponse(BaseModel):
    success: bool = True
    data: ManagerDashboard
