"""
Authorization interfaces - Core abstractions.

These define the values passed through a scoped-access decision and the
read contract the decision engine needs from persistence. Guard code
depends ONLY on these, never on a concrete store.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


# ============================================================
# INPUTS
# ============================================================

@dataclass(frozen=True)
class Principal:
    """
    Authenticated caller, as produced by the authentication layer.

    Either field may be missing; the guard maps that to UNAUTHENTICATED.
    """
    id: str | None
    global_role: str | None


@dataclass(frozen=True)
class ScopeParams:
    """
    Target of a request.

    Attributes:
        section_id: Direct scope id (a course section)
        course_id: Parent scope id, expanded into section ids when needed
    """
    section_id: str | None = None
    course_id: str | None = None


@dataclass(frozen=True)
class Assignment:
    """A scoped-access grant: user_id may operate on resource_id."""
    id: str
    user_id: str
    resource_id: str


@dataclass(frozen=True)
class ContentScope:
    """
    Target of a course-content request.

    Any one id is enough to find the course. A course id is used as-is;
    otherwise enrollment, then lesson, then section is looked up.
    """
    course_id: str | None = None
    enrollment_id: str | None = None
    lesson_id: str | None = None
    section_id: str | None = None


@dataclass(frozen=True)
class Enrollment:
    """A learner's enrollment in a course."""
    id: str
    user_id: str
    course_id: str
    status: str


# ============================================================
# DECISION
# ============================================================

class Outcome(str, Enum):
    """Terminal states of an access decision."""
    UNAUTHENTICATED = "unauthenticated"
    ALLOWED_BY_HIERARCHY = "allowed_by_hierarchy"
    ALLOWED_BY_DOMAIN_SUPERUSER = "allowed_by_domain_superuser"
    ALLOWED_BY_ASSIGNMENT = "allowed_by_assignment"
    DENIED_INSUFFICIENT_ROLE = "denied_insufficient_role"
    DENIED_MISSING_SCOPE = "denied_missing_scope"
    DENIED_NO_DIRECT_ASSIGNMENT = "denied_no_direct_assignment"
    DENIED_NO_PARENT_ASSIGNMENT = "denied_no_parent_assignment"
    # Course content
    ALLOWED_BY_ENROLLMENT = "allowed_by_enrollment"
    DENIED_NOT_ENROLLED = "denied_not_enrolled"
    DENIED_SCOPE_NOT_FOUND = "denied_scope_not_found"


ALLOWED_OUTCOMES = frozenset({
    Outcome.ALLOWED_BY_HIERARCHY,
    Outcome.ALLOWED_BY_DOMAIN_SUPERUSER,
    Outcome.ALLOWED_BY_ASSIGNMENT,
    Outcome.ALLOWED_BY_ENROLLMENT,
})


@dataclass(frozen=True)
class Decision:
    """
    Result of a guard evaluation.

    Attributes:
        outcome: Which terminal state was reached
        reason: Human-readable explanation (for errors/logging)
        assignment: Matched assignment, only for ALLOWED_BY_ASSIGNMENT
        enrollment: Matched enrollment, only for ALLOWED_BY_ENROLLMENT
    """
    outcome: Outcome
    reason: str | None = None
    assignment: Assignment | None = None
    enrollment: Enrollment | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome in ALLOWED_OUTCOMES

    @classmethod
    def allow(cls, outcome: Outcome, reason: str | None = None) -> "Decision":
        if outcome not in ALLOWED_OUTCOMES:
            raise ValueError(f"Not an allow outcome: {outcome.value}")
        return cls(outcome=outcome, reason=reason)

    @classmethod
    def allow_with(cls, assignment: Assignment) -> "Decision":
        return cls(
            outcome=Outcome.ALLOWED_BY_ASSIGNMENT,
            reason="Instructor assignment",
            assignment=assignment,
        )

    @classmethod
    def allow_enrolled(cls, enrollment: Enrollment) -> "Decision":
        return cls(
            outcome=Outcome.ALLOWED_BY_ENROLLMENT,
            reason="Active enrollment",
            enrollment=enrollment,
        )

    @classmethod
    def deny(cls, outcome: Outcome, reason: str) -> "Decision":
        if outcome in ALLOWED_OUTCOMES:
            raise ValueError(f"Not a deny outcome: {outcome.value}")
        return cls(outcome=outcome, reason=reason)


# ============================================================
# PERSISTENCE READ CONTRACT
# ============================================================

class AssignmentStore(ABC):
    """
    Read-only access to sections and instructor assignments.

    Implementations:
    - DatabaseAssignmentStore: SQLAlchemy async session (default)
    - MemoryAssignmentStore: in-process dicts for development and tests

    Store errors must propagate; returning "nothing found" on a failure
    would turn an outage into a denial.
    """

    @abstractmethod
    async def list_direct_scope_ids_for_parent(self, parent_id: str) -> list[str]:
        """
        List section ids belonging to a course.

        Returns:
            Section ids (empty if the course has none)
        """
        pass

    @abstractmethod
    async def find_assignment_for_user_and_scopes(
        self,
        user_id: str,
        resource_ids: Iterable[str],
    ) -> Assignment | None:
        """
        Find one assignment for user_id whose resource is in resource_ids.

        Returns:
            Matching Assignment or None
        """
        pass


class EnrollmentStore(ABC):
    """
    Read-only access to enrollments and the course each content id belongs to.

    Every lookup returns None for an unknown id. Store errors propagate.
    """

    @abstractmethod
    async def get_course_id_for_enrollment(self, enrollment_id: str) -> str | None:
        pass

    @abstractmethod
    async def get_course_id_for_lesson(self, lesson_id: str) -> str | None:
        pass

    @abstractmethod
    async def get_course_id_for_section(self, section_id: str) -> str | None:
        pass

    @abstractmethod
    async def find_active_enrollment(self, user_id: str, course_id: str) -> Enrollment | None:
        """
        Find user_id's active enrollment in course_id.

        Suspended and completed enrollments do not count.
        """
        pass
