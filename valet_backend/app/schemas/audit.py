"""
Audit log Pydantic schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict, Optional, List


class AuditLogResponse(BaseModel):
    id: int
    actor_id: Optional[str] = None
    actor_login: Optional[str] = None
    action: str
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    meta_data: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    timestamp: datetime

    class Config:
        from_attributes = True


class AuditTrailResponse(BaseModel):
    success: bool = True
    data: List[AuditLogResponse]
