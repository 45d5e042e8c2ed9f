"""Async engine and session factory for the SQL gateway."""

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from agrostudy.config import get_settings


@lru_cache
def get_engine() -> AsyncEngine:
    """Engine for the configured database, created on first use."""
    settings = get_settings()
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        connect_args={"ssl": "require"} if settings.database_requires_ssl else {},
    )


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    # Rows are read back after commit, so nothing may expire
    return async_sessionmaker(bind=get_engine(), class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def dispose_engine() -> None:
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
