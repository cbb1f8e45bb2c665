"""
Centralized Test Configuration.
"""

import pytest
from datetime import date
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.pool import Pool, StaticPool

from valet_backend.app.main import app
from valet_backend.app.db.session import get_db, Base, build_engine, build_session_factory
from valet_backend.app.db.init_db import seed_roles
from valet_backend.app.core.security import get_password_hash
from valet_backend.app.models.enums import ROLE_IDS, UserRole
from valet_backend.app.models.location import Location
from valet_backend.app.models.location_access import LocationAccess
from valet_backend.app.models.user import User

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = build_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = build_session_factory(engine)


async def override_get_db():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture(autouse=True)
def apply_overrides():
    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables and role rows before each test and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with TestingSessionLocal() as session:
        await seed_roles(session)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def make_user():
    """Insert a user directly; passwords are bcrypt hashed unless hashed=False."""
    counter = {"n": 0}

    async def _make_user(
        user_id: str,
        role: UserRole,
        password: str = "password123",
        email_id: str = None,
        phone_number: str = None,
        status: bool = True,
        hashed: bool = True,
        name: str = None,
    ) -> User:
        counter["n"] += 1
        user = User(
            user_id=user_id,
            name=name or f"{role.value.title()} {counter['n']}",
            email_id=email_id or f"{user_id.lower()}@test.com",
            phone_number=phone_number or f"98765{counter['n']:05d}",
            password=get_password_hash(password) if hashed else password,
            role_id=ROLE_IDS[role],
            status=status,
        )
        async with TestingSessionLocal() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_location():
    async def _make_location(
        location_id: str,
        status: bool = True,
        location_type: str = "MALL",
        name: str = None,
    ) -> Location:
        location = Location(
            location_id=location_id,
            location_name=name or f"Location {location_id}",
            location_short_code=location_id[:3],
            location_type=location_type,
            valid_from=date(2026, 1, 1),
            status=status,
        )
        async with TestingSessionLocal() as session:
            session.add(location)
            await session.commit()
            await session.refresh(location)
        return location

    return _make_location


@pytest.fixture
def grant_access():
    async def _grant_access(user_id: str, location_id: str) -> LocationAccess:
        access = LocationAccess(user_id=user_id, location_id=location_id)
        async with TestingSessionLocal() as session:
            session.add(access)
            await session.commit()
        return access

    return _grant_access


@pytest.fixture
def login(client):
    """Log in through the API and return bearer headers."""
    async def _login(login_id: str, password: str = "password123") -> dict:
        response = await client.post("/api/auth/login", json={
            "login_id": login_id,
            "password": password
        })
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
async def admin_headers(make_user, login):
    await make_user("ADM-0001", UserRole.ADMIN, password="admin123", email_id="admin@test.com")
    return await login("ADM-0001", "admin123")
