"""
Access check routes.

Each route answers "may the caller act here?" for a scope, so clients
can gate UI actions before calling the owning service.
"""

from fastapi import APIRouter, Depends, Request

from scopeguard.core.auth.dependencies import (
    CourseAdminAccess,
    EnrolledAccess,
    InstructorAccess,
    require_roles,
)
from scopeguard.core.auth.interfaces import Decision
from scopeguard.core.auth.roles import GlobalRole
from scopeguard.schemas.access import AccessResponse, AssignmentResponse, EnrollmentResponse

router = APIRouter()


@router.get("/sections/{section_id}", response_model=AccessResponse)
async def check_section_access(
    section_id: str,
    request: Request,
    decision: InstructorAccess,
):
    """Check instructor access to a course section."""
    # Handlers read the grounding assignment from request state
    assignment = request.state.instructor_assignment
    return AccessResponse(
        outcome=decision.outcome.value,
        reason=decision.reason,
        assignment=AssignmentResponse.model_validate(assignment) if assignment else None,
    )


@router.get("/courses/{course_id}", response_model=AccessResponse)
async def check_course_access(
    course_id: str,
    decision: InstructorAccess,
):
    """Check instructor access to any section of a course."""
    return AccessResponse.from_decision(decision)


@router.get("/courses/{course_id}/admin", response_model=AccessResponse)
async def check_course_admin_access(
    course_id: str,
    decision: CourseAdminAccess,
):
    """Check course administration access."""
    return AccessResponse.from_decision(decision)


@router.get("/reports", response_model=AccessResponse)
async def check_reports_access(
    decision: Decision = Depends(require_roles(GlobalRole.EDITOR)),
):
    """Check access to editor-level reporting."""
    return AccessResponse.from_decision(decision)


# ============ Course content (learners) ============


@router.get("/courses/{course_id}/content", response_model=AccessResponse)
async def check_course_content_access(course_id: str, decision: EnrolledAccess):
    """Check enrolled access to a course."""
    return AccessResponse.from_decision(decision)


@router.get("/sections/{section_id}/content", response_model=AccessResponse)
async def check_section_content_access(section_id: str, decision: EnrolledAccess):
    """Check enrolled access to the course a section belongs to."""
    return AccessResponse.from_decision(decision)


@router.get("/lessons/{lesson_id}", response_model=AccessResponse)
async def check_lesson_access(
    lesson_id: str,
    request: Request,
    decision: EnrolledAccess,
):
    """Check enrolled access to the course a lesson belongs to."""
    # Handlers read the enrollment from request state
    enrollment = request.state.enrollment
    return AccessResponse(
        outcome=decision.outcome.value,
        reason=decision.reason,
        enrollment=EnrollmentResponse.model_validate(enrollment) if enrollment else None,
    )


@router.get("/enrollments/{enrollment_id}", response_model=AccessResponse)
async def check_enrollment_access(enrollment_id: str, decision: EnrolledAccess):
    """Check that an enrollment's course is open to the caller."""
    return AccessResponse.from_decision(decision)
