"""
Owner account service.

Creates an OWNER principal together with its first location access grant in
a single transaction, and lists owners with their number of locations.
"""

import re
from dataclasses import dataclass
from typing import List, Optional
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from valet_backend.app.core.exceptions import (
    ConflictError,
    InternalError,
    InvalidInputError,
    ResourceNotFoundError,
)
from valet_backend.app.core.logging_config import get_logger
from valet_backend.app.core.security import get_password_hash
from valet_backend.app.db import errors as db_errors
from valet_backend.app.models.enums import UserRole
from valet_backend.app.models.location_access import LocationAccess
from valet_backend.app.models.role import RoleMaster
from valet_backend.app.models.user import User
from valet_backend.app.schemas.owner import OwnerCreate
from valet_backend.app.services import identifiers
from valet_backend.app.services.identifiers import Clock
from valet_backend.app.services.location_service import get_location

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]+$")
MIN_PHONE_LENGTH = 10

EMAIL_EXISTS = "Email already exists."
PHONE_EXISTS = "Phone number already exists."

_CONFLICT_MESSAGES = {
    db_errors.EMAIL: EMAIL_EXISTS,
    db_errors.PHONE: PHONE_EXISTS,
}


@dataclass
class CreatedOwner:
    owner: User
    location_access: LocationAccess


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_phone(phone: str) -> str:
    return phone.strip()


def validate_owner_input(data: OwnerCreate) -> None:
    if not all([data.name, data.email_id, data.phone_number, data.password, data.location_id]):
        raise InvalidInputError("name, email_id, phone_number, password, and location_id are required.")

    if not EMAIL_PATTERN.match(data.email_id.strip()):
        raise InvalidInputError("Invalid email format.")

    phone = normalize_phone(data.phone_number)
    if not PHONE_PATTERN.match(phone) or len(phone) < MIN_PHONE_LENGTH:
        raise InvalidInputError("Invalid phone number format.")


async def ensure_contact_available(db: AsyncSession, email: str, phone: str) -> None:
    """Raise ConflictError when the email or phone number is already registered."""
    result = await db.execute(
        select(User.email_id, User.phone_number).where(
            or_(func.lower(User.email_id) == email, User.phone_number == phone)
        )
    )
    rows = result.all()
    if any((row.email_id or "").lower() == email for row in rows):
        raise ConflictError(EMAIL_EXISTS)
    if any(row.phone_number == phone for row in rows):
        raise ConflictError(PHONE_EXISTS)


async def get_role_id(db: AsyncSession, role: UserRole) -> Optional[int]:
    result = await db.execute(select(RoleMaster.role_id).where(RoleMaster.role_name == role))
    return result.scalar_one_or_none()


async def grant_location_access(db: AsyncSession, user_id: str, location_id: str) -> LocationAccess:
    access = LocationAccess(user_id=user_id, location_id=location_id)
    db.add(access)
    await db.flush()
    return access


async def create_owner(
    db: AsyncSession,
    data: OwnerCreate,
    clock: Optional[Clock] = None,
) -> CreatedOwner:
    """
    Create an owner and assign it to one active location.

    The user row and the location_access row are written in one transaction;
    on any failure both are rolled back.

    Raises:
        InvalidInputError: missing or malformed fields
        ConflictError: email or phone number already registered
        ResourceNotFoundError: location missing or disabled
        InternalError: OWNER role missing from role_master
        DuplicateIdentifierError: generated owner id kept colliding
    """
    validate_owner_input(data)

    email = normalize_email(data.email_id)
    phone = normalize_phone(data.phone_number)
    location_id = data.location_id.strip()

    await ensure_contact_available(db, email, phone)

    location = await get_location(db, location_id, active_only=True)
    if not location:
        raise ResourceNotFoundError("Location", location_id, message="Location not found or inactive.")

    owner_role_id = await get_role_id(db, UserRole.OWNER)
    if not owner_role_id:
        raise InternalError("OWNER role not found in system.")

    hashed_password = get_password_hash(data.password)

    async def generate() -> str:
        return await identifiers.generate_owner_id(db, clock=clock)

    async def insert(owner_id: str) -> CreatedOwner:
        owner = User(
            user_id=owner_id,
            name=data.name.strip(),
            email_id=email,
            phone_number=phone,
            password=hashed_password,
            role_id=owner_role_id,
            status=True,
        )
        db.add(owner)
        await db.flush()

        access = await grant_location_access(db, owner_id, location_id)

        await db.commit()
        await db.refresh(owner)
        await db.refresh(access)
        return CreatedOwner(owner=owner, location_access=access)

    try:
        created = await identifiers.insert_with_generated_id(
            db,
            identifiers.OWNER_SCOPE,
            generate,
            insert,
            duplicate_message="Owner ID already exists. Please retry.",
        )
    except IntegrityError as exc:
        # Already rolled back by insert_with_generated_id
        key = db_errors.violated_unique_key(exc)
        logger.warning("Owner creation rejected by constraint %s", db_errors.constraint_name(exc))
        if key in _CONFLICT_MESSAGES:
            raise ConflictError(_CONFLICT_MESSAGES[key])
        if db_errors.is_unique_violation(exc):
            raise ConflictError("Owner ID, email, or phone number already exists.")
        raise

    logger.info("Owner created: %s at %s", created.owner.user_id, location_id)
    return created


async def list_owners(db: AsyncSession) -> List[dict]:
    """Owners with their number of granted locations, newest first."""
    query = (
        select(
            User.user_id,
            User.name,
            User.email_id,
            User.phone_number,
            User.status,
            User.created_at,
            RoleMaster.role_name,
            func.count(LocationAccess.location_id).label("location_count"),
        )
        .join(RoleMaster, User.role_id == RoleMaster.role_id)
        .outerjoin(LocationAccess, User.user_id == LocationAccess.user_id)
        .where(RoleMaster.role_name == UserRole.OWNER)
        .group_by(
            User.user_id, User.name, User.email_id, User.phone_number,
            User.status, User.created_at, RoleMaster.role_name,
        )
        .order_by(User.created_at.desc(), User.user_id.desc())
    )
    result = await db.execute(query)
    return [dict(row._mapping) for row in result.all()]
