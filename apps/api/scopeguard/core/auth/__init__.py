"""
Scoped authorization module.

Answers one question per request: may this principal act on this
course section (or on some section of this course)?

Usage:
======

Direct use (no web framework):
------------------------------
    from scopeguard.core.auth import InstructorGuard, Principal, ScopeParams

    guard = InstructorGuard(store)
    decision = await guard.evaluate(
        Principal(id="inst-1", global_role="instructor"),
        ScopeParams(section_id="s1"),
    )
    decision.allowed        # True / False
    decision.outcome        # Outcome.ALLOWED_BY_ASSIGNMENT, ...
    decision.assignment     # the grounding assignment, if any

In routes (FastAPI):
--------------------
    from scopeguard.core.auth.dependencies import InstructorAccess

    @router.post("/sections/{section_id}/grades")
    async def grade(section_id: str, decision: InstructorAccess):
        ...

Configuration:
==============

Environment variables (or in config):
- AUTH_ASSIGNMENT_STORE: "database" (default), "memory"
- AUTH_ENROLLMENT_STORE: "database" (default), "memory"
- AUTH_MEMORY_SEED_FILE: JSON fixtures for the memory stores
- AUTH_HIERARCHY_THRESHOLD: "admin" (default)
- AUTH_SUPERUSER_ROLE: "course_administrator" (default)
- AUTH_OPERATOR_ROLE: "instructor" (default)
"""

# Core interfaces
from .interfaces import (
    Principal,
    ScopeParams,
    Assignment,
    ContentScope,
    Enrollment,
    Outcome,
    Decision,
    AssignmentStore,
    EnrollmentStore,
)

# Role table
from .roles import (
    GlobalRole,
    ScopedRole,
    NO_RANK,
    rank,
    has_minimum_rank,
    is_global_role,
    is_scoped_role,
    get_role_display_name,
)

# Registry (for extending with custom stores)
from .registry import AuthRegistry

# Resolution and guards
from .resolver import AssignmentResolver
from .guard import InstructorGuard, CourseAdminGuard, EnrollmentGuard, RolesGuard

# Default implementations (auto-registered)
from .stores import (
    DatabaseAssignmentStore,
    DatabaseEnrollmentStore,
    MemoryAssignmentStore,
    MemoryEnrollmentStore,
)

__all__ = [
    # Interfaces
    "Principal",
    "ScopeParams",
    "Assignment",
    "ContentScope",
    "Enrollment",
    "Outcome",
    "Decision",
    "AssignmentStore",
    "EnrollmentStore",
    # Roles
    "GlobalRole",
    "ScopedRole",
    "NO_RANK",
    "rank",
    "has_minimum_rank",
    "is_global_role",
    "is_scoped_role",
    "get_role_display_name",
    # Registry
    "AuthRegistry",
    # Guards
    "AssignmentResolver",
    "InstructorGuard",
    "CourseAdminGuard",
    "EnrollmentGuard",
    "RolesGuard",
    # Default implementations
    "DatabaseAssignmentStore",
    "DatabaseEnrollmentStore",
    "MemoryAssignmentStore",
    "MemoryEnrollmentStore",
]
