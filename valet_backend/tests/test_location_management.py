"""
Admin location management tests.
"""

import re
import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from valet_backend.app.models.audit_log import AuditLog
from valet_backend.app.models.enums import UserRole
from valet_backend.app.models.location import Location
from valet_backend.app.services import audit
from valet_backend.app.services.audit import AuditAction
from valet_backend.app.services.identifiers import current_year_suffix

YY = current_year_suffix()


def location_payload(**overrides):
    payload = {
        "location_name": "Phoenix Marketcity",
        "location_short_code": "pmc",
        "location_type": "MALL",
        "address": "LBS Marg, Kurla",
        "valid_from": "2026-01-01",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_location(client, admin_headers):
    response = await client.post("/api/admin/locations", json=location_payload(), headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Location created successfully."
    data = body["data"]
    assert data["location_id"] == f"PMC-M{YY}-001"
    assert data["location_short_code"] == "PMC"
    assert data["location_type"] == "MALL"
    assert data["status"] is True
    assert data["valid_to"] is None


@pytest.mark.asyncio
async def test_location_sequence_increments_across_short_codes(client, admin_headers):
    first = await client.post("/api/admin/locations", json=location_payload(), headers=admin_headers)
    second = await client.post(
        "/api/admin/locations",
        json=location_payload(location_name="Taj Lands End", location_short_code="TLE", location_type="hotel"),
        headers=admin_headers,
    )

    assert first.json()["data"]["location_id"] == f"PMC-M{YY}-001"
    assert second.status_code == 201
    assert second.json()["data"]["location_id"] == f"TLE-H{YY}-002"
    assert second.json()["data"]["location_type"] == "HOTEL"


@pytest.mark.asyncio
@pytest.mark.parametrize("location_type,letter,stored", [
    ("", "O", "OTHER"),
    ("  ", "O", "OTHER"),
    ("Airport", "A", "AIRPORT"),
])
async def test_location_type_letter(client, admin_headers, location_type, letter, stored):
    response = await client.post(
        "/api/admin/locations",
        json=location_payload(location_type=location_type),
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert re.match(rf"^PMC-{letter}{YY}-001$", data["location_id"])
    assert data["location_type"] == stored


@pytest.mark.asyncio
async def test_short_code_must_be_three_characters(client, admin_headers):
    response = await client.post(
        "/api/admin/locations",
        json=location_payload(location_short_code="ab"),
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Location short code must be exactly 3 characters."


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["location_name", "location_short_code", "location_type", "valid_from"])
async def test_required_fields(client, admin_headers, missing):
    payload = location_payload()
    del payload[missing]

    response = await client.post("/api/admin/locations", json=payload, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == (
        "location_name, location_short_code, location_type and valid_from are required."
    )


@pytest.mark.asyncio
async def test_validity_window_must_be_ordered(client, admin_headers):
    response = await client.post(
        "/api/admin/locations",
        json=location_payload(valid_from="2026-05-01", valid_to="2026-04-30"),
        headers=admin_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [UserRole.OWNER, UserRole.MANAGER])
async def test_non_admin_cannot_manage_locations(client, make_user, login, role):
    await make_user("USR-0001", role)
    headers = await login("USR-0001")

    create = await client.post("/api/admin/locations", json=location_payload(), headers=headers)
    listing = await client.get("/api/admin/locations", headers=headers)

    assert create.status_code == 403
    assert create.json()["message"] == "Access denied. Required role: ADMIN"
    assert listing.status_code == 403


@pytest.mark.asyncio
async def test_unauthenticated_request_is_rejected(client):
    response = await client.get("/api/admin/locations")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_includes_disabled_locations(client, admin_headers, make_location):
    await make_location("AAA-M26-001")
    await make_location("BBB-M26-002", status=False)

    response = await client.get("/api/admin/locations", headers=admin_headers)

    assert response.status_code == 200
    ids = {loc["location_id"] for loc in response.json()["data"]}
    assert ids == {"AAA-M26-001", "BBB-M26-002"}


@pytest.mark.asyncio
async def test_disable_and_enable_location(client, db_session, admin_headers, make_location):
    await make_location("AAA-M26-001")

    disabled = await client.put(
        "/api/admin/locations/AAA-M26-001/status", json={"status": False}, headers=admin_headers
    )
    assert disabled.status_code == 200
    assert disabled.json()["message"] == "Location disabled."
    assert disabled.json()["data"]["status"] is False

    me = await client.get("/api/auth/me", headers=admin_headers)
    assert me.json()["data"]["accessibleLocations"] == []

    enabled = await client.put(
        "/api/admin/locations/AAA-M26-001/status", json={"status": True}, headers=admin_headers
    )
    assert enabled.json()["message"] == "Location enabled."

    result = await db_session.execute(
        select(AuditLog.action).where(AuditLog.target_id == "AAA-M26-001").order_by(AuditLog.id)
    )
    assert result.scalars().all() == [AuditAction.LOCATION_DISABLED, AuditAction.LOCATION_ENABLED]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"status": "false"}, {"status": 1}, {"status": None}])
async def test_status_must_be_boolean(client, admin_headers, make_location, body):
    await make_location("AAA-M26-001")

    response = await client.put("/api/admin/locations/AAA-M26-001/status", json=body, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "status (boolean) is required."


@pytest.mark.asyncio
async def test_status_of_unknown_location(client, admin_headers):
    response = await client.put(
        "/api/admin/locations/NOP-M26-404/status", json={"status": True}, headers=admin_headers
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Location not found."


@pytest.mark.asyncio
async def test_audit_trail_lists_admin_actions(client, admin_headers):
    await client.post("/api/admin/locations", json=location_payload(), headers=admin_headers)

    response = await client.get(
        "/api/admin/audit-logs", params={"action": AuditAction.LOCATION_CREATED}, headers=admin_headers
    )

    assert response.status_code == 200
    logs = response.json()["data"]
    assert len(logs) == 1
    assert logs[0]["target_id"] == f"PMC-M{YY}-001"
    assert logs[0]["actor_id"] == "ADM-0001"


@pytest.mark.asyncio
@pytest.mark.parametrize("short_code", ["a1b", "12c", "äbc"])
async def test_short_code_must_be_letters(client, admin_headers, short_code):
    response = await client.post(
        "/api/admin/locations",
        json=location_payload(location_short_code=short_code),
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Location short code must contain only letters A-Z."


@pytest.mark.asyncio
async def test_unusual_types_keep_ids_in_format_and_sequence(client, admin_headers):
    created = []
    for short_code, location_type in [("abc", "1st floor"), ("xyz", "École"), ("def", "MALL")]:
        response = await client.post(
            "/api/admin/locations",
            json=location_payload(location_short_code=short_code, location_type=location_type),
            headers=admin_headers,
        )
        assert response.status_code == 201
        created.append(response.json()["data"]["location_id"])

    assert created == [f"ABC-O{YY}-001", f"XYZ-O{YY}-002", f"DEF-M{YY}-003"]
    assert all(re.match(r"^[A-Z]{3}-[A-Z]\d{2}-\d{3}$", location_id) for location_id in created)


@pytest.mark.asyncio
async def test_failed_audit_write_does_not_fail_created_location(client, db_session, admin_headers, monkeypatch):
    async def broken_log_event(db, action, **fields):
        raise OperationalError("INSERT INTO audit_logs", {}, Exception("disk I/O error"))

    monkeypatch.setattr(audit, "log_event", broken_log_event)

    response = await client.post("/api/admin/locations", json=location_payload(), headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["data"]["location_id"] == f"PMC-M{YY}-001"
    stored = await db_session.execute(select(Location.location_id))
    assert stored.scalars().all() == [f"PMC-M{YY}-001"]
