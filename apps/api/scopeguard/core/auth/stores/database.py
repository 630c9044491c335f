"""
Database backends for assignment and enrollment lookups.

Read course tables through an AsyncSession. Nothing here writes.
"""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from scopeguard.models.course import CourseEnrollment, InstructorAssignment
from scopeguard.repositories.course import (
    CourseEnrollmentRepository,
    CourseLessonRepository,
    CourseSectionRepository,
    InstructorAssignmentRepository,
)

from ..interfaces import Assignment, AssignmentStore, Enrollment, EnrollmentStore
from ..registry import AuthRegistry


@AuthRegistry.assignment_store("database")
class DatabaseAssignmentStore(AssignmentStore):
    """
    SQLAlchemy-backed assignment store.

    One session per request; pooling is the engine's concern.
    """

    def __init__(self, db: AsyncSession, **kwargs):
        self.db = db
        self.sections = CourseSectionRepository(db)
        self.assignments = InstructorAssignmentRepository(db)

    async def list_direct_scope_ids_for_parent(self, parent_id: str) -> list[str]:
        return await self.sections.list_ids_for_course(parent_id)

    async def find_assignment_for_user_and_scopes(
        self,
        user_id: str,
        resource_ids: Iterable[str],
    ) -> Assignment | None:
        model = await self.assignments.find_first(user_id, list(resource_ids))
        if not model:
            return None
        return self._model_to_assignment(model)

    @staticmethod
    def _model_to_assignment(model: InstructorAssignment) -> Assignment:
        return Assignment(
            id=model.id,
            user_id=model.user_id,
            resource_id=model.course_section_id,
        )


@AuthRegistry.enrollment_store("database")
class DatabaseEnrollmentStore(EnrollmentStore):
    """SQLAlchemy-backed enrollment store."""

    def __init__(self, db: AsyncSession, **kwargs):
        self.db = db
        self.sections = CourseSectionRepository(db)
        self.lessons = CourseLessonRepository(db)
        self.enrollments = CourseEnrollmentRepository(db)

    async def get_course_id_for_enrollment(self, enrollment_id: str) -> str | None:
        return await self.enrollments.get_course_id(enrollment_id)

    async def get_course_id_for_lesson(self, lesson_id: str) -> str | None:
        return await self.lessons.get_course_id(lesson_id)

    async def get_course_id_for_section(self, section_id: str) -> str | None:
        return await self.sections.get_course_id(section_id)

    async def find_active_enrollment(self, user_id: str, course_id: str) -> Enrollment | None:
        model = await self.enrollments.find_active(user_id, course_id)
        if not model:
            return None
        return self._model_to_enrollment(model)

    @staticmethod
    def _model_to_enrollment(model: CourseEnrollment) -> Enrollment:
        return Enrollment(
            id=model.id,
            user_id=model.user_id,
            course_id=model.course_id,
            status=model.status,
        )
