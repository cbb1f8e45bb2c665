"""
Admin audit trail endpoint.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from valet_backend.app.core.access_scope import Principal
from valet_backend.app.core.guards import require_admin
from valet_backend.app.db.session import get_db
from valet_backend.app.schemas.audit import AuditLogResponse, AuditTrailResponse
from valet_backend.app.services.audit import get_audit_trail

router = APIRouter(prefix="/admin/audit-logs", tags=["Admin Audit"])


@router.get("", response_model=AuditTrailResponse)
async def list_audit_logs(
    action: Optional[str] = Query(None, description="Filter by action, e.g. OWNER_CREATED"),
    target_id: Optional[str] = Query(None, description="Filter by location_id or user_id"),
    limit: int = Query(100, ge=1, le=500),
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Most recent audit events first (Admin only)."""
    logs = await get_audit_trail(db, target_id=target_id, action=action, limit=limit)
    return AuditTrailResponse(data=[AuditLogResponse.model_validate(log) for log in logs])
