"""
Audit logging service for sign-ins and admin actions.

Audit rows are written after the business transaction has committed, so a
failed audit write never undoes a location or owner creation.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from sqlalchemy.exc import SQLAlchemyError
from valet_backend.app.core.logging_config import get_logger
from valet_backend.app.models.audit_log import AuditLog

logger = get_logger(__name__)


class AuditAction:
    """Standardized audit action constants."""
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"

    LOCATION_CREATED = "LOCATION_CREATED"
    LOCATION_ENABLED = "LOCATION_ENABLED"
    LOCATION_DISABLED = "LOCATION_DISABLED"

    OWNER_CREATED = "OWNER_CREATED"


class AuditTarget:
    LOCATION = "LOCATION"
    USER = "USER"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Optional[str] = None,
    actor_login: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> AuditLog:
    """
    Log a security or admin event to the audit log.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_id: user_id of the principal performing the action
        actor_login: login id as submitted (for failed sign-ins)
        target_type: AuditTarget constant
        target_id: location_id or user_id acted upon
        metadata: Additional context as JSON
        ip_address: IP address of the request

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        actor_login=actor_login,
        action=action,
        target_type=target_type,
        target_id=target_id,
        meta_data=metadata,
        ip_address=ip_address
    )

    db.add(audit_log)
    await db.commit()
    await db.refresh(audit_log)

    logger.info("audit %s actor=%s target=%s", action, actor_id or actor_login, target_id)
    return audit_log


async def record_event(db: AsyncSession, action: str, **fields) -> Optional[AuditLog]:
    """
    log_event for calls made after a business commit.

    The business change is already durable at that point, so a failed audit
    write is logged and rolled back instead of failing the request.
    """
    try:
        return await log_event(db, action, **fields)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Audit write failed for %s on %s", action, fields.get("target_id"))
        return None


async def log_auth_event(
    db: AsyncSession,
    action: str,
    user_id: Optional[str],
    login_id: Optional[str],
    ip_address: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """Log a sign-in attempt (AuditAction.LOGIN_SUCCESS or LOGIN_FAILED)."""
    return await log_event(
        db=db,
        action=action,
        actor_id=user_id,
        actor_login=login_id,
        ip_address=ip_address,
        metadata=metadata
    )


async def get_audit_trail(
    db: AsyncSession,
    target_id: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering, most recent first.
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if target_id:
        query = query.where(AuditLog.target_id == target_id)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())
