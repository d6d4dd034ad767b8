"""
Database Session Management

Async engine and session factory. DATABASE_URL may be given in its sync
form (sqlite:///, postgresql://); the async driver is substituted here.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from ridegroups.config import settings

ASYNC_DRIVERS = {
    "sqlite://": "sqlite+aiosqlite://",
    "postgresql://": "postgresql+asyncpg://",
}


def to_async_url(url: str) -> str:
    for sync_prefix, async_prefix in ASYNC_DRIVERS.items():
        if url.startswith(sync_prefix):
            return async_prefix + url[len(sync_prefix):]
    return url


def engine_options(url: str) -> dict:
    """Per-dialect engine arguments."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    if url.startswith("postgresql"):
        return {
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 1800,  # seconds
        }
    return {}


_async_url = to_async_url(settings.database_url)
async_engine = create_async_engine(_async_url, **engine_options(_async_url))

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db() -> None:
    """Create missing tables (development; production runs Alembic)."""
    from ridegroups.models import Base, register_models

    register_models()

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
