"""Async engine, session factory and the per-request session dependency."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import Settings, get_settings

settings = get_settings()


def engine_options(config: Settings) -> dict[str, Any]:
    """
    Keyword arguments for create_async_engine.

    Connections are recycled before managed Postgres providers drop idle
    ones, and SSL goes through connect_args because asyncpg ignores
    sslmode in the URL.
    """
    return {
        "echo": config.debug,
        "pool_pre_ping": True,
        "pool_size": config.db_pool_size,
        "max_overflow": config.db_max_overflow,
        "pool_recycle": config.db_pool_recycle_seconds,
        "connect_args": {"ssl": "require"} if config.database_requires_ssl else {},
    }


engine = create_async_engine(settings.database_url, **engine_options(settings))

# Rows stay readable after commit; routes serialize them after the service commits
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request.

    Commits when the handler returns normally and rolls back on any error,
    including JournalError raised after a partial write.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
