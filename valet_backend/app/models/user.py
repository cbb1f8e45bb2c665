"""
User database model.

A user is a principal of the valet operation (admin, owner, manager or driver).
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from valet_backend.app.db.session import Base


class User(Base):
    """
    User model for authentication and location scoping.

    user_id is a human-readable identifier (e.g. OWN-26-0001 for owners).
    password holds a bcrypt hash; development seed rows may hold cleartext.
    """
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email_id", name="users_email_id_key"),
        UniqueConstraint("phone_number", name="users_phone_number_key"),
    )

    user_id = Column(String(20), primary_key=True)
    name = Column(String(150), nullable=False)
    email_id = Column(String(255), nullable=False, index=True)
    phone_number = Column(String(20), nullable=False, index=True)
    password = Column(String(255), nullable=False)

    role_id = Column(Integer, ForeignKey("role_master.role_id"), nullable=False, index=True)
    role = relationship("RoleMaster", lazy="joined")

    # Soft disable only, rows are never deleted
    status = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def role_name(self):
        return self.role.role_name if self.role is not None else None

    def __repr__(self):
        return f"<User(user_id='{self.user_id}', email='{self.email_id}', role_id={self.role_id})>"
