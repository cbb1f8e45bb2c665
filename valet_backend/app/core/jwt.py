"""
JWT token utilities for authentication.

This module provides functions for encoding and decoding JWT tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
from valet_backend.app.core.config import settings
from valet_backend.app.core.exceptions import InvalidTokenError, TokenExpiredError


def create_access_token(
    user_id: str,
    role_name: str,
    role_id: int,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: Stable identity of the principal
        role_name: ADMIN | OWNER | MANAGER
        role_id: Numeric role reference from role_master
        expires_delta: Optional custom expiration time
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT token string

    Example payload:
        {
            "sub": "OWN-26-0001",
            "user_id": "OWN-26-0001",
            "role_name": "OWNER",
            "role_id": 2,
            "iat": 1767225600,
            "exp": 1767312000
        }
    """
    issued_at = now or datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": user_id,
        "user_id": user_id,
        "role_name": getattr(role_name, "value", role_name),
        "role_id": role_id,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload (sub, user_id, role_name, role_id, iat, exp)

    Raises:
        TokenExpiredError: signature valid but exp has passed
        InvalidTokenError: bad signature, malformed token or missing identity
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()

    if not payload.get("user_id"):
        raise InvalidTokenError("Invalid token payload.")
    return payload
