"""
Role master database model.

Maps each role name to the numeric role reference stored on users.
"""

from sqlalchemy import Column, Integer, Enum
from valet_backend.app.db.session import Base
from valet_backend.app.models.enums import UserRole


class RoleMaster(Base):
    __tablename__ = "role_master"

    role_id = Column(Integer, primary_key=True, autoincrement=False)
    role_name = Column(Enum(UserRole, name="user_role"), unique=True, nullable=False)

    def __repr__(self):
        return f"<RoleMaster(role_id={self.role_id}, role_name='{self.role_name.value}')>"
