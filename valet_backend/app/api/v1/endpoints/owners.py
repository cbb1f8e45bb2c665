"""
Admin owner endpoints.

Create owner accounts assigned to a location, and list owners (ADMIN only).
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from valet_backend.app.core.access_scope import Principal
from valet_backend.app.core.guards import require_admin
from valet_backend.app.db.session import get_db
from valet_backend.app.schemas.owner import (
    LocationAccessResponse, OwnerCreate, OwnerCreatedData, OwnerCreatedResponse,
    OwnerListItem, OwnerListResponse, OwnerResponse
)
from valet_backend.app.services import owner_service
from valet_backend.app.services.audit import AuditAction, AuditTarget, record_event

router = APIRouter(prefix="/admin/owners", tags=["Admin Owners"])


@router.post("", response_model=OwnerCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_owner(
    owner_data: OwnerCreate,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Create an owner and assign it to a location (Admin only).

    The owner row and its location access are committed together or not at all.
    """
    created = await owner_service.create_owner(db, owner_data)
    response = OwnerCreatedResponse(
        message="Owner created and assigned to location successfully.",
        data=OwnerCreatedData(
            owner=OwnerResponse.model_validate(created.owner),
            location_access=LocationAccessResponse.model_validate(created.location_access)
        )
    )

    await record_event(
        db=db,
        action=AuditAction.OWNER_CREATED,
        actor_id=admin.user_id,
        target_type=AuditTarget.USER,
        target_id=response.data.owner.user_id,
        metadata={"location_id": response.data.location_access.location_id}
    )
    return response


@router.get("", response_model=OwnerListResponse)
async def list_owners(
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """List owners with their location counts (Admin only)."""
    owners = await owner_service.list_owners(db)
    return OwnerListResponse(data=[OwnerListItem(**owner) for owner in owners])
