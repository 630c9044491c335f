"""
Course repositories.
"""

from collections.abc import Sequence
from sqlalchemy import select

from scopeguard.models.course import (
    CourseEnrollment,
    CourseLesson,
    CourseSection,
    EnrollmentStatus,
    InstructorAssignment,
)
from .base import BaseRepository


class CourseSectionRepository(BaseRepository[CourseSection]):
    model = CourseSection

    async def list_ids_for_course(self, course_id: str) -> list[str]:
        """Ids of all sections in a course (ids only, no row loading)."""
        stmt = select(CourseSection.id).where(CourseSection.course_id == course_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_course_id(self, section_id: str) -> str | None:
        stmt = select(CourseSection.course_id).where(CourseSection.id == section_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class CourseLessonRepository(BaseRepository[CourseLesson]):
    model = CourseLesson

    async def get_course_id(self, lesson_id: str) -> str | None:
        """Course of a lesson, through its section."""
        stmt = (
            select(CourseSection.course_id)
            .join(CourseLesson, CourseLesson.section_id == CourseSection.id)
            .where(CourseLesson.id == lesson_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class InstructorAssignmentRepository(BaseRepository[InstructorAssignment]):
    model = InstructorAssignment

    async def find_first(
        self,
        user_id: str,
        section_ids: Sequence[str],
    ) -> InstructorAssignment | None:
        """First assignment of user_id to any of section_ids."""
        stmt = (
            self._base_query()
            .where(InstructorAssignment.user_id == user_id)
            .where(InstructorAssignment.course_section_id.in_(section_ids))
            .order_by(InstructorAssignment.created_at, InstructorAssignment.id)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class CourseEnrollmentRepository(BaseRepository[CourseEnrollment]):
    model = CourseEnrollment

    async def get_course_id(self, enrollment_id: str) -> str | None:
        stmt = select(CourseEnrollment.course_id).where(CourseEnrollment.id == enrollment_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_active(self, user_id: str, course_id: str) -> CourseEnrollment | None:
        """The user's active enrollment in a course, if any."""
        stmt = (
            self._base_query()
            .where(CourseEnrollment.user_id == user_id)
            .where(CourseEnrollment.course_id == course_id)
            .where(CourseEnrollment.status == EnrollmentStatus.ACTIVE.value)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
