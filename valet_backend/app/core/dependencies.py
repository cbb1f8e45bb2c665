"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT authentication.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from valet_backend.app.core.access_scope import AccessContext, Principal, build_access_context
from valet_backend.app.core.exceptions import AuthenticationError, PrincipalInactiveError
from valet_backend.app.core.jwt import decode_access_token
from valet_backend.app.db.session import get_db
from valet_backend.app.models.user import User

# HTTP Bearer security scheme; missing headers are reported by get_current_principal
security = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Principal:
    """
    FastAPI dependency for JWT authentication.

    1. Validates JWT token signature and expiry
    2. Re-loads the user so accounts disabled after issuance are rejected

    Raises:
        AuthenticationError: 401 with a distinct message for missing token,
            invalid token, expired token and inactive/unknown user
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access denied. No token provided.", error_code="ERR_AUTH_000")

    payload = decode_access_token(credentials.credentials)

    result = await db.execute(
        select(User).where(User.user_id == payload["user_id"], User.status == True)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise PrincipalInactiveError()

    return Principal.from_user(user)


async def get_access_context(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
) -> AccessContext:
    """Principal plus the locations it may act upon, resolved for this request."""
    return await build_access_context(db, principal)
