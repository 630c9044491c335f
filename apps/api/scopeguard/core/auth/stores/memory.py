"""
In-memory backends for assignment and enrollment lookups.

For development and testing. Data is lost on restart.
"""

from collections import defaultdict
from collections.abc import Iterable
from uuid import uuid4

from ..interfaces import Assignment, AssignmentStore, Enrollment, EnrollmentStore
from ..registry import AuthRegistry


@AuthRegistry.assignment_store("memory")
class MemoryAssignmentStore(AssignmentStore):
    """
    In-memory assignment storage.

    Useful for:
    - Development without database
    - Unit testing the guard in isolation

    The add_* helpers stand in for the administrative workflow that owns
    these records; the guard itself only calls the two read methods.
    """

    def __init__(self, **kwargs):
        self._sections: dict[str, list[str]] = defaultdict(list)
        self._assignments: list[Assignment] = []

    def add_section(self, course_id: str, section_id: str) -> None:
        self._sections[course_id].append(section_id)

    def add_assignment(self, user_id: str, section_id: str, assignment_id: str | None = None) -> Assignment:
        assignment = Assignment(
            id=assignment_id or str(uuid4()),
            user_id=user_id,
            resource_id=section_id,
        )
        self._assignments.append(assignment)
        return assignment

    async def list_direct_scope_ids_for_parent(self, parent_id: str) -> list[str]:
        return list(self._sections.get(parent_id, []))

    async def find_assignment_for_user_and_scopes(
        self,
        user_id: str,
        resource_ids: Iterable[str],
    ) -> Assignment | None:
        wanted = set(resource_ids)
        for assignment in self._assignments:
            if assignment.user_id == user_id and assignment.resource_id in wanted:
                return assignment
        return None


@AuthRegistry.enrollment_store("memory")
class MemoryEnrollmentStore(EnrollmentStore):
    """In-memory enrollment storage, seeded through the add_* helpers."""

    def __init__(self, **kwargs):
        self._section_courses: dict[str, str] = {}
        self._lesson_sections: dict[str, str] = {}
        self._enrollments: dict[str, Enrollment] = {}

    def add_section(self, course_id: str, section_id: str) -> None:
        self._section_courses[section_id] = course_id

    def add_lesson(self, section_id: str, lesson_id: str) -> None:
        self._lesson_sections[lesson_id] = section_id

    def add_enrollment(
        self,
        user_id: str,
        course_id: str,
        status: str = "active",
        enrollment_id: str | None = None,
    ) -> Enrollment:
        enrollment = Enrollment(
            id=enrollment_id or str(uuid4()),
            user_id=user_id,
            course_id=course_id,
            status=status,
        )
        self._enrollments[enrollment.id] = enrollment
        return enrollment

    async def get_course_id_for_enrollment(self, enrollment_id: str) -> str | None:
        enrollment = self._enrollments.get(enrollment_id)
        return enrollment.course_id if enrollment else None

    async def get_course_id_for_lesson(self, lesson_id: str) -> str | None:
        section_id = self._lesson_sections.get(lesson_id)
        if section_id is None:
            return None
        return self._section_courses.get(section_id)

    async def get_course_id_for_section(self, section_id: str) -> str | None:
        return self._section_courses.get(section_id)

    async def find_active_enrollment(self, user_id: str, course_id: str) -> Enrollment | None:
        for enrollment in self._enrollments.values():
            if (
                enrollment.user_id == user_id
                and enrollment.course_id == course_id
                and enrollment.status == "active"
            ):
                return enrollment
        return None
