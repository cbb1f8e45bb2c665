"""
Location access database model.

Grants a non-admin principal visibility over one location.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from valet_backend.app.db.session import Base


class LocationAccess(Base):
    __tablename__ = "location_access"
    __table_args__ = (
        UniqueConstraint("user_id", "location_id", name="location_access_user_location_key"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String(20), ForeignKey("users.user_id"), nullable=False, index=True)
    location_id = Column(String(20), ForeignKey("locations.location_id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<LocationAccess(user_id='{self.user_id}', location_id='{self.location_id}')>"
