"""
Dashboard tests: role gates, location scoping and counts.
"""

import pytest

from valet_backend.app.models.enums import BlockEntryStatus, UserRole, ValetTransactionStatus
from valet_backend.app.models.valet_transaction import BlockEntry, ValetTransaction


@pytest.fixture
async def parking_data(db_session, make_location):
    await make_location("AAA-M26-001")
    await make_location("BBB-H26-002")
    await make_location("CCC-O26-003", status=False)

    db_session.add_all([
        ValetTransaction(location_id="AAA-M26-001", status=ValetTransactionStatus.PARKED),
        ValetTransaction(location_id="AAA-M26-001", status=ValetTransactionStatus.READY),
        ValetTransaction(location_id="AAA-M26-001", status=ValetTransactionStatus.DELIVERED),
        ValetTransaction(location_id="BBB-H26-002", status=ValetTransactionStatus.RETURN_REQUESTED),
        ValetTransaction(location_id="CCC-O26-003", status=ValetTransactionStatus.CANCELLED),
        BlockEntry(location_id="AAA-M26-001", status=BlockEntryStatus.AVAILABLE),
        BlockEntry(location_id="AAA-M26-001", status=BlockEntryStatus.AVAILABLE),
        BlockEntry(location_id="AAA-M26-001", status=BlockEntryStatus.OCCUPIED),
        BlockEntry(location_id="BBB-H26-002", status=BlockEntryStatus.AVAILABLE),
    ])
    await db_session.commit()


@pytest.fixture
async def owner_headers(make_user, grant_access, login, parking_data):
    await make_user("OWN-26-0001", UserRole.OWNER)
    await grant_access("OWN-26-0001", "AAA-M26-001")
    await grant_access("OWN-26-0001", "CCC-O26-003")
    return await login("OWN-26-0001")


@pytest.mark.asyncio
async def test_admin_dashboard(client, admin_headers, parking_data, make_user):
    await make_user("OWN-26-0001", UserRole.OWNER)
    await make_user("MGR-0001", UserRole.MANAGER, status=False)

    response = await client.get("/api/dashboard/admin", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert {loc["location_id"] for loc in data["locations"]} == {"AAA-M26-001", "BBB-H26-002"}
    assert {stat["role_name"]: stat["count"] for stat in data["userStats"]} == {"ADMIN": 1, "OWNER": 1}
    assert data["totalTransactions"] == 5


@pytest.mark.asyncio
async def test_owner_dashboard_counts_only_own_locations(client, owner_headers):
    response = await client.get("/api/dashboard/owner", headers=owner_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    # CCC is granted but disabled, so it is out of scope
    assert [loc["location_id"] for loc in data["locations"]] == ["AAA-M26-001"]
    assert data["totalTransactions"] == 3
    assert data["activeParkings"] == 2


@pytest.mark.asyncio
async def test_owner_dashboard_for_one_location(client, owner_headers):
    response = await client.get(
        "/api/dashboard/owner", params={"location_id": "AAA-M26-001"}, headers=owner_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["totalTransactions"] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("location_id", ["BBB-H26-002", "CCC-O26-003"])
async def test_owner_dashboard_rejects_foreign_location(client, owner_headers, location_id):
    response = await client.get(
        "/api/dashboard/owner", params={"location_id": location_id}, headers=owner_headers
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied. Location not assigned to this user."


@pytest.mark.asyncio
async def test_owner_without_locations(client, make_user, login, parking_data):
    await make_user("OWN-26-0002", UserRole.OWNER)
    headers = await login("OWN-26-0002")

    summary = await client.get("/api/dashboard/owner", headers=headers)
    assert summary.status_code == 200
    assert summary.json()["data"] == {"locations": [], "totalTransactions": 0, "activeParkings": 0}

    scoped = await client.get("/api/dashboard/owner", params={"location_id": "AAA-M26-001"}, headers=headers)
    assert scoped.status_code == 403
    assert scoped.json()["message"] == "No locations assigned to this user."


@pytest.mark.asyncio
async def test_manager_dashboard(client, make_user, grant_access, login, parking_data):
    await make_user("MGR-0001", UserRole.MANAGER)
    await grant_access("MGR-0001", "AAA-M26-001")
    headers = await login("MGR-0001")

    response = await client.get("/api/dashboard/manager", headers=headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["location"]["location_id"] == "AAA-M26-001"
    assert data["totalTransactions"] == 3
    assert data["activeParkings"] == 2
    assert data["availableBlocks"] == 2


@pytest.mark.asyncio
async def test_manager_without_location(client, make_user, login):
    await make_user("MGR-0002", UserRole.MANAGER)
    headers = await login("MGR-0002")

    response = await client.get("/api/dashboard/manager", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["location"] is None
    assert response.json()["data"]["availableBlocks"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("path,role", [
    ("/api/dashboard/admin", UserRole.OWNER),
    ("/api/dashboard/owner", UserRole.MANAGER),
    ("/api/dashboard/manager", UserRole.OWNER),
])
async def test_dashboards_are_role_gated(client, make_user, login, path, role):
    await make_user("USR-0001", role)
    headers = await login("USR-0001")

    response = await client.get(path, headers=headers)

    assert response.status_code == 403
