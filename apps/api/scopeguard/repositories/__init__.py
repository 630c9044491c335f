"""
Repository pattern for data access.
"""

from scopeguard.repositories.base import BaseRepository
from scopeguard.repositories.course import (
    CourseEnrollmentRepository,
    CourseLessonRepository,
    CourseSectionRepository,
    InstructorAssignmentRepository,
)

__all__ = [
    "BaseRepository",
    "CourseEnrollmentRepository",
    "CourseLessonRepository",
    "CourseSectionRepository",
    "InstructorAssignmentRepository",
]
