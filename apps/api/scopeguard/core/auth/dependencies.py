"""
FastAPI dependencies for scoped authorization.

This is the transport adapter: it builds the Principal from the bearer
token, runs a guard, and turns the Decision into an HTTP outcome.

Usage:
    from scopeguard.core.auth.dependencies import InstructorAccess, CourseAdminAccess, EnrolledAccess

    @router.post("/sections/{section_id}/grades")
    async def handler(section_id: str, decision: InstructorAccess):
        ...

    @router.delete("/courses/{course_id}")
    async def handler(course_id: str, decision: CourseAdminAccess):
        ...

    @router.get("/lessons/{lesson_id}")
    async def handler(lesson_id: str, decision: EnrolledAccess):
        ...
"""

from typing import Annotated, Callable
from functools import lru_cache

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from scopeguard.api.dependencies.database import get_db
from scopeguard.core.config import settings
from scopeguard.utils.context import set_context_user

from .guard import CourseAdminGuard, EnrollmentGuard, InstructorGuard, RolesGuard
from .interfaces import (
    AssignmentStore,
    ContentScope,
    Decision,
    EnrollmentStore,
    Outcome,
    Principal,
    ScopeParams,
)
from .registry import AuthRegistry
from .roles import GlobalRole

# Import to register store implementations
from . import stores  # noqa: F401
from .stores import MemoryAssignmentStore, MemoryEnrollmentStore, MemorySeed

logger = structlog.get_logger()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# ============================================================
# DECISION -> HTTP
# ============================================================

def status_code_for(decision: Decision) -> int:
    """Map a decision to the conventional HTTP status code."""
    if decision.allowed:
        return status.HTTP_200_OK
    if decision.outcome == Outcome.UNAUTHENTICATED:
        return status.HTTP_401_UNAUTHORIZED
    if decision.outcome == Outcome.DENIED_SCOPE_NOT_FOUND:
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_403_FORBIDDEN


def raise_for_decision(decision: Decision) -> Decision:
    """
    Raise HTTPException for a denial, return the decision otherwise.

    The decision's specific reason becomes the response detail.
    """
    if decision.allowed:
        return decision

    code = status_code_for(decision)
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    raise HTTPException(status_code=code, detail=decision.reason, headers=headers)


# ============================================================
# COMPONENT FACTORIES
# ============================================================

@lru_cache
def get_memory_stores() -> tuple[MemoryAssignmentStore, MemoryEnrollmentStore]:
    """
    Process-wide memory stores.

    Loaded from AUTH_MEMORY_SEED_FILE on first use when it is set; callers
    may also seed them directly through the add_* helpers.
    """
    assignments = MemoryAssignmentStore()
    enrollments = MemoryEnrollmentStore()
    if settings.auth.memory_seed_file:
        MemorySeed.from_file(settings.auth.memory_seed_file).apply(assignments, enrollments)
        logger.info("authorization.memory_seeded", path=settings.auth.memory_seed_file)
    return assignments, enrollments


def get_assignment_store(db: AsyncSession = Depends(get_db)) -> AssignmentStore:
    """
    Get configured assignment store.

    Reads from AUTH_ASSIGNMENT_STORE environment variable.
    Default: "database". The memory store never touches the session, and an
    unused session never checks out a connection.
    """
    store_name = settings.auth.assignment_store

    if store_name == "memory":
        return get_memory_stores()[0]

    return AuthRegistry.get_assignment_store(store_name, db=db)


def get_enrollment_store(db: AsyncSession = Depends(get_db)) -> EnrollmentStore:
    """Get configured enrollment store (AUTH_ENROLLMENT_STORE)."""
    store_name = settings.auth.enrollment_store

    if store_name == "memory":
        return get_memory_stores()[1]

    return AuthRegistry.get_enrollment_store(store_name, db=db)


def get_instructor_guard(
    store: AssignmentStore = Depends(get_assignment_store),
) -> InstructorGuard:
    return InstructorGuard(
        store,
        hierarchy_threshold=settings.auth.hierarchy_threshold,
        superuser_role=settings.auth.superuser_role,
        operator_role=settings.auth.operator_role,
    )


def get_course_admin_guard() -> CourseAdminGuard:
    return CourseAdminGuard(
        hierarchy_threshold=settings.auth.hierarchy_threshold,
        superuser_role=settings.auth.superuser_role,
    )


def get_enrollment_guard(
    store: EnrollmentStore = Depends(get_enrollment_store),
) -> EnrollmentGuard:
    return EnrollmentGuard(store)


# ============================================================
# PRINCIPAL
# ============================================================

async def get_current_principal(
    token: str | None = Depends(oauth2_scheme),
) -> Principal | None:
    """
    Build the principal from a bearer JWT.

    Uses the "sub" and "role" claims. Missing or invalid tokens give None;
    the guard decides what that means.
    """
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.auth.secret_key,
            algorithms=[settings.auth.algorithm],
        )
    except JWTError as exc:
        logger.info("authorization.invalid_token", error=str(exc))
        return None

    principal = Principal(id=payload.get("sub"), global_role=payload.get("role"))
    set_context_user(principal.id, principal.global_role)
    return principal


# ============================================================
# GUARD DEPENDENCIES
# ============================================================

async def require_instructor_access(
    request: Request,
    principal: Principal | None = Depends(get_current_principal),
    guard: InstructorGuard = Depends(get_instructor_guard),
) -> Decision:
    """
    Require instructor access to the section or course in the path.

    Expects: path param section_id or course_id.
    On an assignment-based allow, the assignment is available as
    request.state.instructor_assignment.
    """
    scope = ScopeParams(
        section_id=request.path_params.get("section_id") or None,
        course_id=request.path_params.get("course_id") or None,
    )
    decision = raise_for_decision(await guard.evaluate(principal, scope))

    request.state.instructor_assignment = decision.assignment
    return decision


async def require_course_admin(
    principal: Principal | None = Depends(get_current_principal),
    guard: CourseAdminGuard = Depends(get_course_admin_guard),
) -> Decision:
    """Require admin+ or the course administrator role."""
    return raise_for_decision(guard.evaluate(principal))


async def require_enrollment(
    request: Request,
    principal: Principal | None = Depends(get_current_principal),
    guard: EnrollmentGuard = Depends(get_enrollment_guard),
) -> Decision:
    """
    Require an active enrollment in the course behind the path.

    Expects: path param course_id, enrollment_id, lesson_id or section_id.
    The enrollment is available as request.state.enrollment.
    """
    params = request.path_params
    scope = ContentScope(
        course_id=params.get("course_id") or None,
        enrollment_id=params.get("enrollment_id") or None,
        lesson_id=params.get("lesson_id") or None,
        section_id=params.get("section_id") or None,
    )
    decision = raise_for_decision(await guard.evaluate(principal, scope))

    request.state.enrollment = decision.enrollment
    return decision


def require_roles(*roles: GlobalRole | str) -> Callable:
    """
    Dependency factory for a minimum global role (ANY of roles).

    Usage:
        @router.get("/reports", dependencies=[Depends(require_roles("editor"))])
        async def reports():
            ...
    """
    required = tuple(GlobalRole(role) for role in roles)
    guard = RolesGuard()

    async def check_roles(
        principal: Principal | None = Depends(get_current_principal),
    ) -> Decision:
        return raise_for_decision(guard.evaluate(principal, required))

    return check_roles


# ============================================================
# TYPE ALIASES FOR CLEAN SIGNATURES
# ============================================================

InstructorAccess = Annotated[Decision, Depends(require_instructor_access)]

CourseAdminAccess = Annotated[Decision, Depends(require_course_admin)]

EnrolledAccess = Annotated[Decision, Depends(require_enrollment)]
