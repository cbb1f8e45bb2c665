"""
Admin location endpoints.

Create, list and enable/disable locations (ADMIN only).
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from valet_backend.app.core.access_scope import Principal
from valet_backend.app.core.guards import require_admin
from valet_backend.app.db.session import get_db
from valet_backend.app.schemas.location import (
    LocationCreate, LocationEnvelope, LocationListResponse, LocationResponse, LocationStatusUpdate
)
from valet_backend.app.services import location_service
from valet_backend.app.services.audit import AuditAction, AuditTarget, record_event

router = APIRouter(prefix="/admin/locations", tags=["Admin Locations"])


@router.post("", response_model=LocationEnvelope, status_code=status.HTTP_201_CREATED)
async def create_location(
    location_data: LocationCreate,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a location (Admin only).

    The location_id is generated as SHORTCODE-TYPELETTERYY-SEQ.
    """
    location = await location_service.create_location(db, location_data)
    response = LocationEnvelope(
        message="Location created successfully.",
        data=LocationResponse.model_validate(location)
    )

    # Built before auditing: a failed audit write rolls back and expires `location`.
    await record_event(
        db=db,
        action=AuditAction.LOCATION_CREATED,
        actor_id=admin.user_id,
        target_type=AuditTarget.LOCATION,
        target_id=response.data.location_id,
        metadata={"location_name": response.data.location_name, "location_type": response.data.location_type}
    )
    return response


@router.get("", response_model=LocationListResponse)
async def list_locations(
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """List every location, including disabled ones (Admin only)."""
    locations = await location_service.list_locations(db)
    return LocationListResponse(data=[LocationResponse.model_validate(loc) for loc in locations])


@router.put("/{location_id}/status", response_model=LocationEnvelope)
async def update_location_status(
    location_id: str,
    update: LocationStatusUpdate,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Enable or disable a location (Admin only). Locations are never deleted."""
    location = await location_service.update_location_status(db, location_id, update.status)
    enabled = location.status
    response = LocationEnvelope(
        message="Location enabled." if enabled else "Location disabled.",
        data=LocationResponse.model_validate(location)
    )

    await record_event(
        db=db,
        action=AuditAction.LOCATION_ENABLED if enabled else AuditAction.LOCATION_DISABLED,
        actor_id=admin.user_id,
        target_type=AuditTarget.LOCATION,
        target_id=location_id
    )
    return response
