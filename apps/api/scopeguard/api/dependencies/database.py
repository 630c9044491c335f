"""
Database dependencies.
"""

from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession

from scopeguard.models.database import read_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Read-only session for the request; never committed."""
    async with read_session() as session:
        yield session
