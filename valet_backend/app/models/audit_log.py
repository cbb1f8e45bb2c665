"""
Audit Log Database Model.

Tracks sign-ins and admin actions on locations and owner accounts.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from valet_backend.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - LOGIN_SUCCESS / LOGIN_FAILED
    - LOCATION_CREATED / LOCATION_ENABLED / LOCATION_DISABLED
    - OWNER_CREATED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None when the login id did not resolve)
    actor_id = Column(String(20), index=True, nullable=True)
    actor_login = Column(String(255), nullable=True)

    action = Column(String(100), nullable=False, index=True)

    # What was acted upon: a location_id or a user_id
    target_type = Column(String(20), nullable=True)
    target_id = Column(String(20), index=True, nullable=True)

    meta_data = Column(JSON, nullable=True)
    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_id}, target={self.target_id})>"
