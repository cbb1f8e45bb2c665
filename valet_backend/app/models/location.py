"""
Location database model.

A location is a physical valet site (mall, hotel, ...).
"""

from sqlalchemy import Column, String, Boolean, Date, DateTime
from sqlalchemy.sql import func
from valet_backend.app.db.session import Base


class Location(Base):
    """
    Location model.

    location_id is generated once (SHORTCODE-TYPELETTERYY-SEQ) and never changes.
    Locations are disabled through status, never deleted.
    """
    __tablename__ = "locations"

    location_id = Column(String(20), primary_key=True)
    location_name = Column(String(200), nullable=False)
    location_short_code = Column(String(3), nullable=False, index=True)
    location_type = Column(String(50), nullable=False)
    address = Column(String(500), nullable=True)

    # Validity window, open ended when valid_to is NULL
    valid_from = Column(Date, nullable=False)
    valid_to = Column(Date, nullable=True)

    status = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Location(location_id='{self.location_id}', name='{self.location_name}', active={self.status})>"
