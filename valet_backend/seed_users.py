"""
Database seeding script for development.

Creates the role master rows, an ADMIN user and (optionally) a sample
location. Run this script after the database is reachable.

    python -m valet_backend.seed_users --with-location
"""

import argparse
import asyncio
from datetime import date

from sqlalchemy import select

from valet_backend.app.core.logging_config import configure_logging, get_logger
from valet_backend.app.core.security import get_password_hash
from valet_backend.app.db.init_db import init_db
from valet_backend.app.db.session import AsyncSessionLocal, engine
from valet_backend.app.models.enums import ROLE_IDS, UserRole
from valet_backend.app.models.user import User
from valet_backend.app.schemas.location import LocationCreate
from valet_backend.app.services.location_service import create_location

logger = get_logger("seed")

ADMIN_USER_ID = "ADM-0001"


async def seed(admin_email: str, admin_phone: str, admin_password: str, with_location: bool) -> None:
    await init_db(engine, AsyncSessionLocal)

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.user_id == ADMIN_USER_ID))
        if result.scalar_one_or_none():
            logger.info("ADMIN user already exists, skipping")
        else:
            db.add(User(
                user_id=ADMIN_USER_ID,
                name="Administrator",
                email_id=admin_email.strip().lower(),
                phone_number=admin_phone,
                password=get_password_hash(admin_password),
                role_id=ROLE_IDS[UserRole.ADMIN],
                status=True,
            ))
            await db.commit()
            logger.info("Created ADMIN user %s (%s)", ADMIN_USER_ID, admin_email)

        if with_location:
            location = await create_location(db, LocationCreate(
                location_name="Sample Mall",
                location_short_code="SMP",
                location_type="MALL",
                valid_from=date.today(),
            ))
            logger.info("Created sample location %s", location.location_id)

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed development data")
    parser.add_argument("--admin-email", default="admin@valet.local")
    parser.add_argument("--admin-phone", default="0000000000")
    parser.add_argument("--admin-password", default="admin123")
    parser.add_argument("--with-location", action="store_true")
    args = parser.parse_args()

    configure_logging()
    asyncio.run(seed(args.admin_email, args.admin_phone, args.admin_password, args.with_location))


if __name__ == "__main__":
    main()
