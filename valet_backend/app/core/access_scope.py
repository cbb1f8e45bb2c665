"""
Location access scoping.

Decides which locations a principal may see or act upon. ADMIN sees every
active location; every other role sees the active locations granted to it
through location_access. Disabled locations are invisible to all roles.

The resolved scope is carried as an explicit AccessContext value that
endpoints receive as a parameter.
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from valet_backend.app.core.exceptions import LocationNotAssignedError, RoleNotAllowedError
from valet_backend.app.models.enums import UserRole
from valet_backend.app.models.location import Location
from valet_backend.app.models.location_access import LocationAccess


class LocationVisibility(str, enum.Enum):
    ALL_ACTIVE = "ALL_ACTIVE"
    GRANTED_ACTIVE = "GRANTED_ACTIVE"


LOCATION_VISIBILITY: Dict[UserRole, LocationVisibility] = {
    UserRole.ADMIN: LocationVisibility.ALL_ACTIVE,
    UserRole.OWNER: LocationVisibility.GRANTED_ACTIVE,
    UserRole.MANAGER: LocationVisibility.GRANTED_ACTIVE,
    UserRole.DRIVER: LocationVisibility.GRANTED_ACTIVE,
}


@dataclass(frozen=True)
class Principal:
    """Authenticated user as seen by authorization code."""
    user_id: str
    name: str
    role: UserRole
    role_id: int
    is_active: bool = True
    email_id: Optional[str] = None
    phone_number: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(
            user_id=user.user_id,
            name=user.name,
            role=UserRole(user.role_name),
            role_id=user.role_id,
            is_active=bool(user.status),
            email_id=user.email_id,
            phone_number=user.phone_number,
        )


@dataclass(frozen=True)
class AccessContext:
    """Per-request principal plus the locations it may act upon."""
    principal: Principal
    locations: List[Location] = field(default_factory=list)

    @property
    def location_ids(self) -> Set[str]:
        return {location.location_id for location in self.locations}


def _visibility_query(principal: Principal):
    rule = LOCATION_VISIBILITY[principal.role]
    query = select(Location).where(Location.status == True)
    if rule is LocationVisibility.GRANTED_ACTIVE:
        query = query.join(
            LocationAccess, LocationAccess.location_id == Location.location_id
        ).where(LocationAccess.user_id == principal.user_id)
    return query.order_by(Location.created_at.desc(), Location.location_id)


async def resolve_accessible_locations(db: AsyncSession, principal: Principal) -> List[Location]:
    """Active locations visible to the principal, newest first."""
    result = await db.execute(_visibility_query(principal))
    return list(result.scalars().unique().all())


async def resolve_accessible_location_ids(db: AsyncSession, principal: Principal) -> Set[str]:
    return {location.location_id for location in await resolve_accessible_locations(db, principal)}


async def build_access_context(db: AsyncSession, principal: Principal) -> AccessContext:
    return AccessContext(principal=principal, locations=await resolve_accessible_locations(db, principal))


def validate_location_access(
    principal: Principal,
    accessible_ids: Iterable[str],
    requested_location_id: Optional[str],
) -> bool:
    """
    True if the requested location is inside the accessible set.

    A request that references no location is not subject to scoping and
    always passes.
    """
    if not requested_location_id:
        return True
    return requested_location_id in set(accessible_ids)


def require_role(principal: Principal, allowed_roles: Iterable[UserRole]) -> bool:
    return principal.role in frozenset(allowed_roles)


def enforce_role(principal: Principal, allowed_roles: Iterable[UserRole]) -> None:
    """Raise RoleNotAllowedError naming the allowed roles on mismatch."""
    allowed: FrozenSet[UserRole] = frozenset(allowed_roles)
    if not require_role(principal, allowed):
        raise RoleNotAllowedError(sorted(role.value for role in allowed))


def enforce_location_access(context: AccessContext, requested_location_id: Optional[str]) -> None:
    """Raise LocationNotAssignedError when the location is outside the context's scope."""
    if not requested_location_id:
        return
    accessible = context.location_ids
    if not accessible:
        raise LocationNotAssignedError(requested_location_id, no_locations=True)
    if not validate_location_access(context.principal, accessible, requested_location_id):
        raise LocationNotAssignedError(requested_location_id)
