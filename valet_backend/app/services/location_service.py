"""
Location management service.

Creates locations with generated identifiers, lists them and toggles their
status. Locations are never deleted.
"""

from typing import Any, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from valet_backend.app.core.exceptions import InvalidInputError, ResourceNotFoundError
from valet_backend.app.core.logging_config import get_logger
from valet_backend.app.models.location import Location
from valet_backend.app.schemas.location import LocationCreate
from valet_backend.app.services import identifiers
from valet_backend.app.services.identifiers import Clock

logger = get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = "location_name, location_short_code, location_type and valid_from are required."


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


async def create_location(
    db: AsyncSession,
    data: LocationCreate,
    clock: Optional[Clock] = None,
) -> Location:
    """
    Validate input, generate the location_id and insert the location.

    Raises:
        InvalidInputError: missing fields, bad short code or validity window
        DuplicateIdentifierError: generated id kept colliding
    """
    if (
        _is_blank(data.location_name)
        or _is_blank(data.location_short_code)
        or data.location_type is None
        or data.valid_from is None
    ):
        raise InvalidInputError(REQUIRED_FIELDS_MESSAGE)

    short_code = identifiers.normalize_short_code(data.location_short_code)
    location_type = identifiers.canonical_location_type(data.location_type)

    if data.valid_to is not None and data.valid_to < data.valid_from:
        raise InvalidInputError("valid_to must not be earlier than valid_from.")

    async def generate() -> str:
        return await identifiers.generate_location_id(db, short_code, location_type, clock=clock)

    async def insert(location_id: str) -> Location:
        location = Location(
            location_id=location_id,
            location_name=data.location_name.strip(),
            location_short_code=short_code,
            location_type=location_type,
            address=data.address.strip() if data.address and data.address.strip() else None,
            valid_from=data.valid_from,
            valid_to=data.valid_to,
            status=data.status is not False,
        )
        db.add(location)
        await db.commit()
        await db.refresh(location)
        return location

    location = await identifiers.insert_with_generated_id(
        db,
        identifiers.LOCATION_SCOPE,
        generate,
        insert,
        duplicate_message="Location ID already exists.",
    )
    logger.info("Location created: %s (%s)", location.location_id, location.location_name)
    return location


async def list_locations(db: AsyncSession) -> List[Location]:
    """All locations including disabled ones, newest first."""
    result = await db.execute(
        select(Location).order_by(Location.created_at.desc(), Location.location_id.desc())
    )
    return list(result.scalars().all())


async def get_location(db: AsyncSession, location_id: str, active_only: bool = False) -> Optional[Location]:
    query = select(Location).where(Location.location_id == location_id)
    if active_only:
        query = query.where(Location.status == True)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def update_location_status(db: AsyncSession, location_id: str, status: Any) -> Location:
    """
    Enable or disable a location.

    Raises:
        InvalidInputError: status is not a boolean
        ResourceNotFoundError: no such location
    """
    if not isinstance(status, bool):
        raise InvalidInputError("status (boolean) is required.")

    location = await get_location(db, location_id)
    if not location:
        raise ResourceNotFoundError("Location", location_id, message="Location not found.")

    location.status = status
    await db.commit()
    await db.refresh(location)

    logger.info("Location %s %s", location_id, "enabled" if status else "disabled")
    return location
