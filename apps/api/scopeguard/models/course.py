"""
Course models - courses, sections, lessons, instructor assignments
and enrollments.

Assignments and enrollments are created and changed by the
administrative workflow; the authorization core only reads them.
"""

from enum import Enum

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, StringIdMixin


class Course(Base, StringIdMixin, TimestampMixin):
    """A course; the parent scope of its sections."""

    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    sections: Mapped[list["CourseSection"]] = relationship(
        "CourseSection",
        back_populates="course",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Course {self.title}>"


class CourseSection(Base, StringIdMixin, TimestampMixin):
    """A course section; the direct scope instructors are assigned to."""

    __tablename__ = "course_sections"

    course_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    course: Mapped["Course"] = relationship("Course", back_populates="sections")

    def __repr__(self) -> str:
        return f"<CourseSection {self.title}>"


class InstructorAssignment(Base, StringIdMixin, TimestampMixin):
    """
    Instructor assignment.

    Grants user_id instructor access to one course section.

    Examples:
        InstructorAssignment(user_id="inst-1", course_section_id=section.id)
    """

    __tablename__ = "instructor_assignments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_section_id", name="uq_instructor_assignment"),
    )

    # Users live in the identity service; no FK
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    course_section_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("course_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<InstructorAssignment user={self.user_id} section={self.course_section_id}>"


class CourseLesson(Base, StringIdMixin, TimestampMixin):
    """A lesson inside a course section."""

    __tablename__ = "course_lessons"

    section_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("course_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    section: Mapped["CourseSection"] = relationship("CourseSection")

    def __repr__(self) -> str:
        return f"<CourseLesson {self.title}>"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    COMPLETED = "completed"


class CourseEnrollment(Base, StringIdMixin, TimestampMixin):
    """
    A learner's enrollment in a course.

    Only active enrollments open course content.
    """

    __tablename__ = "course_enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_course_enrollment"),
    )

    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    course_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=EnrollmentStatus.ACTIVE.value,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<CourseEnrollment user={self.user_id} course={self.course_id} status={self.status}>"
