"""
Base repository with common read operations.
"""

from typing import TypeVar, Generic, Type
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from scopeguard.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Base repository providing common read operations.

    Usage:
        class CourseSectionRepository(BaseRepository[CourseSection]):
            model = CourseSection

        repo = CourseSectionRepository(db)
        section = await repo.get_by_id(section_id)
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select:
        """Base query - override to add default filters."""
        return select(self.model)

    async def get_by_id(self, id: str) -> ModelT | None:
        """Get entity by ID."""
        stmt = self._base_query().where(self.model.id == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
