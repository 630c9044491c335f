"""
Database models.
"""

from .base import Base, TimestampMixin, StringIdMixin
from .course import (
    Course,
    CourseSection,
    CourseLesson,
    CourseEnrollment,
    EnrollmentStatus,
    InstructorAssignment,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "StringIdMixin",
    "Course",
    "CourseSection",
    "CourseLesson",
    "CourseEnrollment",
    "EnrollmentStatus",
    "InstructorAssignment",
]
