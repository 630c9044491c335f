"""
Access decision schemas.
"""

from pydantic import BaseModel, ConfigDict

from scopeguard.core.auth.interfaces import Decision


class AssignmentResponse(BaseModel):
    """Instructor assignment that grounded an approval."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    resource_id: str


class EnrollmentResponse(BaseModel):
    """Enrollment that opened course content."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    course_id: str
    status: str


class AccessResponse(BaseModel):
    """Granted access, with the path that granted it."""
    outcome: str
    reason: str | None = None
    assignment: AssignmentResponse | None = None
    enrollment: EnrollmentResponse | None = None

    @classmethod
    def from_decision(cls, decision: Decision) -> "AccessResponse":
        return cls(
            outcome=decision.outcome.value,
            reason=decision.reason,
            assignment=(
                AssignmentResponse.model_validate(decision.assignment)
                if decision.assignment
                else None
            ),
            enrollment=(
                EnrollmentResponse.model_validate(decision.enrollment)
                if decision.enrollment
                else None
            ),
        )
