"""
Database engine and read-only sessions.

This service never writes. Sessions are rolled back when released, never
committed, and on PostgreSQL every transaction is opened READ ONLY. The
schema belongs to the course service.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from scopeguard.core.config import settings


def connect_args_for(url: str, read_only: bool) -> dict[str, Any]:
    """Driver arguments that make the server reject writes."""
    if read_only and url.startswith("postgresql+asyncpg"):
        return {"server_settings": {"default_transaction_read_only": "on"}}
    return {}


engine = create_async_engine(
    settings.database.url,
    echo=settings.database.echo,
    pool_size=settings.database.pool_size,
    max_overflow=settings.database.pool_overflow,
    pool_timeout=settings.database.pool_timeout,
    pool_pre_ping=True,
    connect_args=connect_args_for(settings.database.url, settings.database.read_only),
)

read_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def read_session() -> AsyncIterator[AsyncSession]:
    """
    Session for lookups only.

    No connection is taken from the pool until the first query, and
    whatever happened in the session is rolled back on exit.
    """
    async with read_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


async def ping(db: AsyncSession) -> None:
    """Round-trip to the database; raises if it is unreachable."""
    await db.execute(text("SELECT 1"))


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
