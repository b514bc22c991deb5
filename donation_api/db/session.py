"""
Async database session management.
Design: one session per request. Services commit through their repositories before returning;
this dependency only rolls back on error.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from donation_api.config import get_settings

settings = get_settings()


_SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql+psycopg2",
    "sqlite+aiosqlite": "sqlite",
}


def sync_database_url(async_url: str) -> str:
    """Same database, blocking driver. Used by Alembic, which cannot run on the async engine."""
    url = make_url(async_url)
    sync_driver = _SYNC_DRIVERS.get(url.drivername)
    if sync_driver is not None:
        url = url.set(drivername=sync_driver)
    return url.render_as_string(hide_password=False)


def _engine_options(url: str) -> dict:
    # SQLite uses a single-connection pool class that rejects sizing arguments
    if url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session per request. Rolls back whatever was left uncommitted on error."""
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db)]
