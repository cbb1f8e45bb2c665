"""
Location access scoping tests.
"""

import pytest

from valet_backend.app.core.access_scope import (
    AccessContext,
    Principal,
    build_access_context,
    enforce_location_access,
    enforce_role,
    require_role,
    resolve_accessible_location_ids,
    validate_location_access,
)
from valet_backend.app.core.exceptions import LocationNotAssignedError, RoleNotAllowedError
from valet_backend.app.core.guards import narrow_location_scope
from valet_backend.app.models.enums import ROLE_IDS, UserRole


def principal_for(user_id: str, role: UserRole) -> Principal:
    return Principal(user_id=user_id, name=user_id, role=role, role_id=ROLE_IDS[role])


@pytest.fixture
async def locations(make_location):
    await make_location("AAA-M26-001")
    await make_location("BBB-H26-002")
    await make_location("CCC-O26-003", status=False)


@pytest.mark.asyncio
async def test_admin_sees_every_active_location(db_session, locations):
    ids = await resolve_accessible_location_ids(db_session, principal_for("ADM-0001", UserRole.ADMIN))
    assert ids == {"AAA-M26-001", "BBB-H26-002"}


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [UserRole.OWNER, UserRole.MANAGER])
async def test_granted_roles_see_only_their_active_locations(db_session, locations, make_user, grant_access, role):
    await make_user("USR-0001", role)
    await grant_access("USR-0001", "AAA-M26-001")
    await grant_access("USR-0001", "CCC-O26-003")

    ids = await resolve_accessible_location_ids(db_session, principal_for("USR-0001", role))
    assert ids == {"AAA-M26-001"}


@pytest.mark.asyncio
async def test_no_grants_means_no_locations(db_session, locations, make_user):
    await make_user("OWN-26-0001", UserRole.OWNER)

    context = await build_access_context(db_session, principal_for("OWN-26-0001", UserRole.OWNER))
    assert context.locations == []
    assert context.location_ids == set()


def test_validate_location_access():
    principal = principal_for("OWN-26-0001", UserRole.OWNER)
    accessible = {"AAA-M26-001"}

    assert validate_location_access(principal, accessible, "AAA-M26-001") is True
    assert validate_location_access(principal, accessible, "BBB-H26-002") is False
    # Requests that name no location are not scoped
    assert validate_location_access(principal, accessible, None) is True
    assert validate_location_access(principal, accessible, "") is True
    assert validate_location_access(principal, set(), None) is True


def test_require_role():
    owner = principal_for("OWN-26-0001", UserRole.OWNER)
    assert require_role(owner, [UserRole.OWNER, UserRole.ADMIN]) is True
    assert require_role(owner, [UserRole.ADMIN]) is False


def test_enforce_role_names_allowed_roles():
    manager = principal_for("MGR-0001", UserRole.MANAGER)

    with pytest.raises(RoleNotAllowedError) as exc_info:
        enforce_role(manager, [UserRole.OWNER, UserRole.ADMIN])

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Access denied. Required role: ADMIN or OWNER"


def test_enforce_location_access_messages():
    owner = principal_for("OWN-26-0001", UserRole.OWNER)
    empty = AccessContext(principal=owner, locations=[])

    enforce_location_access(empty, None)

    with pytest.raises(LocationNotAssignedError) as exc_info:
        enforce_location_access(empty, "AAA-M26-001")
    assert exc_info.value.message == "No locations assigned to this user."


@pytest.mark.asyncio
async def test_enforce_location_access_outside_scope(db_session, locations, make_user, grant_access):
    await make_user("OWN-26-0001", UserRole.OWNER)
    await grant_access("OWN-26-0001", "AAA-M26-001")
    context = await build_access_context(db_session, principal_for("OWN-26-0001", UserRole.OWNER))

    enforce_location_access(context, "AAA-M26-001")

    with pytest.raises(LocationNotAssignedError) as exc_info:
        enforce_location_access(context, "BBB-H26-002")
    assert exc_info.value.message == "Access denied. Location not assigned to this user."


@pytest.mark.asyncio
async def test_narrow_location_scope(db_session, locations, make_user, grant_access):
    await make_user("OWN-26-0001", UserRole.OWNER)
    await grant_access("OWN-26-0001", "AAA-M26-001")
    await grant_access("OWN-26-0001", "BBB-H26-002")
    context = await build_access_context(db_session, principal_for("OWN-26-0001", UserRole.OWNER))

    assert narrow_location_scope(context, None) == ["AAA-M26-001", "BBB-H26-002"]
    assert narrow_location_scope(context, "BBB-H26-002") == ["BBB-H26-002"]
    with pytest.raises(LocationNotAssignedError):
        narrow_location_scope(context, "CCC-O26-003")
