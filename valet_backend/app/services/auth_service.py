"""
Staff sign-in.

Resolves a login id (user_id, email or phone number) to an active user,
verifies the password and issues a session token. Drivers are refused here;
they sign in through the mobile app.
"""

from dataclasses import dataclass
from typing import Optional
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from valet_backend.app.core.exceptions import (
    DriverLoginNotAllowedError,
    InvalidCredentialsError,
    InvalidInputError,
)
from valet_backend.app.core.jwt import create_access_token
from valet_backend.app.core.logging_config import get_logger
from valet_backend.app.core.security import verify_password
from valet_backend.app.models.enums import UserRole
from valet_backend.app.models.user import User
from valet_backend.app.services.audit import AuditAction, log_auth_event

logger = get_logger(__name__)


@dataclass
class LoginResult:
    user: User
    token: str


async def find_by_login_id(db: AsyncSession, login_id: str) -> Optional[User]:
    """Active user whose user_id, email (case-insensitive) or phone matches."""
    candidate = login_id.strip()
    result = await db.execute(
        select(User).where(
            or_(
                User.user_id == candidate,
                func.lower(User.email_id) == candidate.lower(),
                User.phone_number == candidate,
            ),
            User.status == True,
        )
    )
    return result.scalars().first()


async def login(
    db: AsyncSession,
    login_id: Optional[str],
    password: Optional[str],
    ip_address: Optional[str] = None,
) -> LoginResult:
    """
    Authenticate a staff member.

    Raises:
        InvalidInputError: login id or password missing (400)
        InvalidCredentialsError: unknown/inactive user or wrong password (401)
        DriverLoginNotAllowedError: the user is a DRIVER (403)
    """
    if not login_id or not login_id.strip() or not password:
        raise InvalidInputError("Login ID and password are required.")

    user = await find_by_login_id(db, login_id)

    if not user:
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=None,
            login_id=login_id,
            ip_address=ip_address,
            metadata={"reason": "User not found"}
        )
        raise InvalidCredentialsError()

    if user.role_name == UserRole.DRIVER:
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.user_id,
            login_id=login_id,
            ip_address=ip_address,
            metadata={"reason": "Driver login attempted"}
        )
        raise DriverLoginNotAllowedError()

    if not verify_password(password, user.password):
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.user_id,
            login_id=login_id,
            ip_address=ip_address,
            metadata={"reason": "Invalid password"}
        )
        raise InvalidCredentialsError()

    token = create_access_token(user.user_id, user.role_name.value, user.role_id)

    await log_auth_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        user_id=user.user_id,
        login_id=login_id,
        ip_address=ip_address
    )
    logger.info("User %s signed in as %s", user.user_id, user.role_name.value)

    return LoginResult(user=user, token=token)
