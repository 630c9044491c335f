"""
Seed data for the memory stores.

Lets a development instance run with AUTH_ASSIGNMENT_STORE=memory or
AUTH_ENROLLMENT_STORE=memory against known fixtures:

    {
        "sections": [{"id": "s1", "course_id": "c1"}],
        "lessons": [{"id": "l1", "section_id": "s1"}],
        "assignments": [{"user_id": "inst-1", "section_id": "s1"}],
        "enrollments": [{"user_id": "learner-1", "course_id": "c1"}]
    }
"""

from pathlib import Path

from pydantic import BaseModel

from .memory import MemoryAssignmentStore, MemoryEnrollmentStore


class SeedSection(BaseModel):
    id: str
    course_id: str


class SeedLesson(BaseModel):
    id: str
    section_id: str


class SeedAssignment(BaseModel):
    user_id: str
    section_id: str
    id: str | None = None


class SeedEnrollment(BaseModel):
    user_id: str
    course_id: str
    status: str = "active"
    id: str | None = None


class MemorySeed(BaseModel):
    """Sections, lessons, assignments and enrollments to preload."""

    sections: list[SeedSection] = []
    lessons: list[SeedLesson] = []
    assignments: list[SeedAssignment] = []
    enrollments: list[SeedEnrollment] = []

    @classmethod
    def from_file(cls, path: str | Path) -> "MemorySeed":
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))

    def apply(
        self,
        assignments: MemoryAssignmentStore,
        enrollments: MemoryEnrollmentStore,
    ) -> None:
        for section in self.sections:
            assignments.add_section(section.course_id, section.id)
            enrollments.add_section(section.course_id, section.id)
        for lesson in self.lessons:
            enrollments.add_lesson(lesson.section_id, lesson.id)
        for assignment in self.assignments:
            assignments.add_assignment(assignment.user_id, assignment.section_id, assignment.id)
        for enrollment in self.enrollments:
            enrollments.add_enrollment(
                enrollment.user_id,
                enrollment.course_id,
                status=enrollment.status,
                enrollment_id=enrollment.id,
            )
