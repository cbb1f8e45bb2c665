"""
Database engine and session wiring.

The application talks to PostgreSQL through asyncpg; tests and local runs may
point DATABASE_URL at SQLite (aiosqlite) instead.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from valet_backend.app.core.config import settings

Base = declarative_base()


def build_engine(url: str, **overrides) -> AsyncEngine:
    """Async engine for `url`; pool sizing only applies to server databases."""
    options = {"echo": settings.db_echo}
    if not url.startswith("sqlite"):
        options.update(pool_size=settings.db_pool_size, max_overflow=settings.db_max_overflow)
    options.update(overrides)
    return create_async_engine(url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    # Rows stay readable after commit; services refresh server defaults explicitly.
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


engine = build_engine(settings.database_url)
AsyncSessionLocal = build_session_factory(engine)


async def get_db():
    """
    FastAPI dependency yielding one session per request.

    Every dependency of a request shares this session, so the principal
    check, the scope lookup and the endpoint see the same transaction.
    """
    async with AsyncSessionLocal() as session:
        yield session
