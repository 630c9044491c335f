"""
Access guards - scoped-role decisions on top of the global hierarchy.

InstructorGuard grants access to a course section if:
1. The principal has admin+ global role, OR
2. The principal has the course_administrator scoped role, OR
3. The principal has the instructor role AND an assignment for the section
   (directly, or for any section of the requested course)

EnrollmentGuard grants course content to learners with an active enrollment
in the course the request points at.

Guards return a Decision and never raise for a denial. Mapping a decision
to a transport response is the caller's job (see dependencies.py).

Usage:
    guard = InstructorGuard(store)
    decision = await guard.evaluate(principal, ScopeParams(section_id="s1"))
    if not decision.allowed:
        ...
"""

import structlog

from .interfaces import (
    Assignment,
    AssignmentStore,
    ContentScope,
    Decision,
    EnrollmentStore,
    Outcome,
    Principal,
    ScopeParams,
)
from .resolver import AssignmentResolver
from .roles import GlobalRole, ScopedRole, has_minimum_rank

logger = structlog.get_logger()


NOT_AUTHENTICATED = "User not authenticated"
INSUFFICIENT_PERMISSIONS = "Access denied: insufficient permissions"
SECTION_REQUIRED = "Section ID is required"
NOT_ASSIGNED_TO_SECTION = "You are not assigned as an instructor for this course section"
NOT_ASSIGNED_TO_COURSE = "You are not assigned as an instructor for any section in this course"
COURSE_ADMIN_REQUIRED = "Access denied: requires course administrator or admin privileges"
ENROLLMENT_REQUIRED = "You must be enrolled in this course to access this content"
COURSE_UNDETERMINED = "Cannot determine course for enrollment verification"


def _is_authenticated(principal: Principal | None) -> bool:
    return bool(principal and principal.id and principal.global_role)


def _log_decision(guard: str, decision: Decision, principal: Principal | None, **fields) -> Decision:
    log = logger.debug if decision.allowed else logger.info
    log(
        "authorization.decision",
        guard=guard,
        outcome=decision.outcome.value,
        user_id=principal.id if principal else None,
        role=principal.global_role if principal else None,
        **fields,
    )
    return decision


class InstructorGuard:
    """
    Decides whether a principal may act on a course section.

    Configuration:
        hierarchy_threshold: Global role that bypasses assignment checks (default: admin)
        superuser_role: Scoped role with full domain access (default: course_administrator)
        operator_role: Scoped role that needs an assignment (default: instructor)
    """

    def __init__(
        self,
        store: AssignmentStore,
        hierarchy_threshold: GlobalRole = GlobalRole.ADMIN,
        superuser_role: ScopedRole = ScopedRole.COURSE_ADMINISTRATOR,
        operator_role: ScopedRole = ScopedRole.INSTRUCTOR,
    ):
        self.resolver = AssignmentResolver(store)
        self.hierarchy_threshold = GlobalRole(hierarchy_threshold)
        self.superuser_role = ScopedRole(superuser_role)
        self.operator_role = ScopedRole(operator_role)

    async def evaluate(self, principal: Principal | None, scope: ScopeParams) -> Decision:
        """
        Evaluate access to the requested scope.

        Steps, first match wins:
        1. No principal / id / role -> UNAUTHENTICATED
        2. Role at or above hierarchy threshold -> ALLOWED_BY_HIERARCHY
        3. Role is the domain superuser role -> ALLOWED_BY_DOMAIN_SUPERUSER
        4. Role is not the operator role -> DENIED_INSUFFICIENT_ROLE
        5. No section id and no course id -> DENIED_MISSING_SCOPE
        6. Assignment lookup (section, or the course's expanded sections)
        """
        decision = await self._evaluate(principal, scope)
        return _log_decision(
            "instructor",
            decision,
            principal,
            section_id=scope.section_id,
            course_id=scope.course_id,
        )

    async def _evaluate(self, principal: Principal | None, scope: ScopeParams) -> Decision:
        if not _is_authenticated(principal):
            return Decision.deny(Outcome.UNAUTHENTICATED, NOT_AUTHENTICATED)

        role = principal.global_role

        if has_minimum_rank(role, self.hierarchy_threshold):
            return Decision.allow(Outcome.ALLOWED_BY_HIERARCHY, "Admin access")

        # Identity check only; scoped roles have no rank
        if role == self.superuser_role:
            return Decision.allow(Outcome.ALLOWED_BY_DOMAIN_SUPERUSER, "Course administrator access")

        if role != self.operator_role:
            return Decision.deny(Outcome.DENIED_INSUFFICIENT_ROLE, INSUFFICIENT_PERMISSIONS)

        if scope.section_id:
            assignment = await self.resolver.find_assignment(principal.id, scope.section_id)
            return self._assignment_decision(
                assignment,
                Outcome.DENIED_NO_DIRECT_ASSIGNMENT,
                NOT_ASSIGNED_TO_SECTION,
            )

        if scope.course_id:
            section_ids = await self.resolver.expand_parent_scope(scope.course_id)
            assignment = await self.resolver.find_assignment(principal.id, section_ids)
            return self._assignment_decision(
                assignment,
                Outcome.DENIED_NO_PARENT_ASSIGNMENT,
                NOT_ASSIGNED_TO_COURSE,
            )

        return Decision.deny(Outcome.DENIED_MISSING_SCOPE, SECTION_REQUIRED)

    @staticmethod
    def _assignment_decision(
        assignment: Assignment | None,
        denied: Outcome,
        reason: str,
    ) -> Decision:
        if assignment is None:
            return Decision.deny(denied, reason)
        return Decision.allow_with(assignment)


class CourseAdminGuard:
    """
    Course-wide administration: admin+ or course_administrator only.

    Never touches the assignment store.
    """

    def __init__(
        self,
        hierarchy_threshold: GlobalRole = GlobalRole.ADMIN,
        superuser_role: ScopedRole = ScopedRole.COURSE_ADMINISTRATOR,
    ):
        self.hierarchy_threshold = GlobalRole(hierarchy_threshold)
        self.superuser_role = ScopedRole(superuser_role)

    def evaluate(self, principal: Principal | None) -> Decision:
        if not _is_authenticated(principal):
            decision = Decision.deny(Outcome.UNAUTHENTICATED, NOT_AUTHENTICATED)
        elif has_minimum_rank(principal.global_role, self.hierarchy_threshold):
            decision = Decision.allow(Outcome.ALLOWED_BY_HIERARCHY, "Admin access")
        elif principal.global_role == self.superuser_role:
            decision = Decision.allow(Outcome.ALLOWED_BY_DOMAIN_SUPERUSER, "Course administrator access")
        else:
            decision = Decision.deny(Outcome.DENIED_INSUFFICIENT_ROLE, COURSE_ADMIN_REQUIRED)

        return _log_decision("course_admin", decision, principal)


class RolesGuard:
    """
    Minimum global role check.

    Passes if the principal meets ANY of the required roles via the
    hierarchy. Scoped roles never pass. No requirement means allow.
    """

    def evaluate(self, principal: Principal | None, required_roles: list[GlobalRole] | tuple[GlobalRole, ...]) -> Decision:
        if not required_roles:
            decision = Decision.allow(Outcome.ALLOWED_BY_HIERARCHY, "No role requirement")
        elif not _is_authenticated(principal):
            decision = Decision.deny(Outcome.UNAUTHENTICATED, NOT_AUTHENTICATED)
        elif any(has_minimum_rank(principal.global_role, required) for required in required_roles):
            decision = Decision.allow(Outcome.ALLOWED_BY_HIERARCHY, "Role requirement met")
        else:
            names = ", ".join(GlobalRole(r).value for r in required_roles)
            decision = Decision.deny(
                Outcome.DENIED_INSUFFICIENT_ROLE,
                f"Access denied: requires one of roles [{names}]",
            )

        return _log_decision("roles", decision, principal)


class EnrollmentGuard:
    """
    Decides whether a learner may read course content.

    The course comes from the course id, or else from the enrollment,
    lesson or section id (first one present wins). Any id that does not
    exist is reported as not found. There is no role bypass.
    """

    def __init__(self, store: EnrollmentStore):
        self.store = store

    async def evaluate(self, principal: Principal | None, scope: ContentScope) -> Decision:
        decision = await self._evaluate(principal, scope)
        return _log_decision(
            "enrollment",
            decision,
            principal,
            course_id=scope.course_id,
            enrollment_id=scope.enrollment_id,
            lesson_id=scope.lesson_id,
            section_id=scope.section_id,
        )

    async def _evaluate(self, principal: Principal | None, scope: ContentScope) -> Decision:
        # Only the user id matters here
        if not principal or not principal.id:
            return Decision.deny(Outcome.UNAUTHENTICATED, NOT_AUTHENTICATED)

        course_id = scope.course_id or None
        lookups = (
            ("Enrollment", scope.enrollment_id, self.store.get_course_id_for_enrollment),
            ("Lesson", scope.lesson_id, self.store.get_course_id_for_lesson),
            ("Section", scope.section_id, self.store.get_course_id_for_section),
        )
        for label, scope_id, lookup in lookups:
            if course_id:
                break
            if not scope_id:
                continue
            course_id = await lookup(scope_id)
            if course_id is None:
                return Decision.deny(
                    Outcome.DENIED_SCOPE_NOT_FOUND,
                    f'{label} with id "{scope_id}" not found',
                )

        if not course_id:
            return Decision.deny(Outcome.DENIED_MISSING_SCOPE, COURSE_UNDETERMINED)

        enrollment = await self.store.find_active_enrollment(principal.id, course_id)
        if enrollment is None:
            return Decision.deny(Outcome.DENIED_NOT_ENROLLED, ENROLLMENT_REQUIRED)
        return Decision.allow_enrolled(enrollment)
