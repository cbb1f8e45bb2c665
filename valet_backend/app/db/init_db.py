"""
Schema creation and reference data.

Creates all tables and makes sure role_master holds one row per role.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from valet_backend.app.core.logging_config import get_logger
from valet_backend.app.db.session import Base
from valet_backend.app.models.enums import ROLE_IDS
from valet_backend.app.models.role import RoleMaster

# Import models to ensure they are registered with Base
from valet_backend.app.models.user import User  # noqa: F401
from valet_backend.app.models.location import Location  # noqa: F401
from valet_backend.app.models.location_access import LocationAccess  # noqa: F401
from valet_backend.app.models.valet_transaction import ValetTransaction, BlockEntry  # noqa: F401
from valet_backend.app.models.audit_log import AuditLog  # noqa: F401

logger = get_logger(__name__)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_roles(db: AsyncSession) -> int:
    """Insert missing role_master rows. Returns the number inserted."""
    result = await db.execute(select(RoleMaster.role_name))
    existing = set(result.scalars().all())

    missing = [role for role in ROLE_IDS if role not in existing]
    for role in missing:
        db.add(RoleMaster(role_id=ROLE_IDS[role], role_name=role))
    if missing:
        await db.commit()
        logger.info("Seeded roles: %s", ", ".join(role.value for role in missing))
    return len(missing)


async def init_db(engine: AsyncEngine, session_factory) -> None:
    await create_tables(engine)
    async with session_factory() as db:
        await seed_roles(db)
