"""
Dashboard endpoints.

Role-gated aggregate counts, scoped by the caller's accessible locations.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from valet_backend.app.core.access_scope import AccessContext
from valet_backend.app.core.guards import narrow_location_scope, require_scoped_role
from valet_backend.app.db.session import get_db
from valet_backend.app.models.enums import UserRole
from valet_backend.app.schemas.dashboard import (
    AdminDashboardResponse, ManagerDashboardResponse, OwnerDashboardResponse
)
from valet_backend.app.services import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/admin", response_model=AdminDashboardResponse)
async def admin_dashboard(
    context: AccessContext = Depends(require_scoped_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """All active locations, active users per role and total transactions."""
    data = await dashboard_service.admin_dashboard(db, context)
    return AdminDashboardResponse(data=data)


@router.get("/owner", response_model=OwnerDashboardResponse)
async def owner_dashboard(
    location_id: Optional[str] = Query(None, description="Restrict to one of the owner's locations"),
    context: AccessContext = Depends(require_scoped_role([UserRole.OWNER])),
    db: AsyncSession = Depends(get_db)
):
    """
    Locations, transactions and active parkings across the owner's locations.

    Returns 403 when location_id is given and not assigned to the owner.
    """
    location_ids = narrow_location_scope(context, location_id)
    data = await dashboard_service.owner_dashboard(db, context, location_ids)
    return OwnerDashboardResponse(data=data)


@router.get("/manager", response_model=ManagerDashboardResponse)
async def manager_dashboard(
    context: AccessContext = Depends(require_scoped_role([UserRole.MANAGER])),
    db: AsyncSession = Depends(get_db)
):
    """Counts for the manager's location, including free parking blocks."""
    data = await dashboard_service.manager_dashboard(db, context)
    return ManagerDashboardResponse(data=data)
