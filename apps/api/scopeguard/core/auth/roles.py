"""
Role definitions - global hierarchy and scoped roles.

Two disjoint kinds of role:
- GlobalRole: ranked; compared with has_minimum_rank()
- ScopedRole: meaningful only inside one resource domain; compared by identity

Scoped roles never appear in the rank table, so they can never satisfy a
hierarchy check.

Usage:
    from scopeguard.core.auth.roles import GlobalRole, has_minimum_rank

    if has_minimum_rank(principal.global_role, GlobalRole.ADMIN):
        ...
"""

from enum import Enum


class GlobalRole(str, Enum):
    """Roles participating in the global hierarchy."""
    CUSTOMER = "customer"
    VIEWER = "viewer"
    EDITOR = "editor"
    STORE_MANAGER = "store_manager"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class ScopedRole(str, Enum):
    """Roles only meaningful within a resource domain."""
    INSTRUCTOR = "instructor"
    COURSE_ADMINISTRATOR = "course_administrator"
    EXHIBITOR = "exhibitor"
    EVENT_STAFF = "event_staff"
    KIOSK_USER = "kiosk_user"


# Role hierarchy (higher number = more privileged)
ROLE_HIERARCHY: dict[GlobalRole, int] = {
    GlobalRole.CUSTOMER: 0,
    GlobalRole.VIEWER: 1,
    GlobalRole.EDITOR: 2,
    GlobalRole.STORE_MANAGER: 3,
    GlobalRole.ADMIN: 4,
    GlobalRole.SUPER_ADMIN: 5,
}

# Below every real rank
NO_RANK = -1

GLOBAL_ROLES: tuple[GlobalRole, ...] = tuple(
    sorted(ROLE_HIERARCHY, key=ROLE_HIERARCHY.__getitem__)
)
SCOPED_ROLES: tuple[ScopedRole, ...] = tuple(ScopedRole)

ROLE_DISPLAY_NAMES: dict[str, str] = {
    GlobalRole.CUSTOMER: "Customer",
    GlobalRole.VIEWER: "Viewer",
    GlobalRole.EDITOR: "Editor",
    GlobalRole.STORE_MANAGER: "Store Manager",
    GlobalRole.ADMIN: "Administrator",
    GlobalRole.SUPER_ADMIN: "Super Administrator",
    ScopedRole.INSTRUCTOR: "Instructor",
    ScopedRole.COURSE_ADMINISTRATOR: "Course Administrator",
    ScopedRole.EXHIBITOR: "Exhibitor",
    ScopedRole.EVENT_STAFF: "Event Staff",
    ScopedRole.KIOSK_USER: "Kiosk User",
}


def _as_global_role(role: str | None) -> GlobalRole | None:
    if role is None:
        return None
    try:
        return GlobalRole(role)
    except ValueError:
        return None


def is_global_role(role: str | None) -> bool:
    """Check if role is part of the global hierarchy."""
    return _as_global_role(role) is not None


def is_scoped_role(role: str | None) -> bool:
    """Check if role is a scoped (identity-checked) role."""
    return role in SCOPED_ROLES


def rank(role: str | None) -> int:
    """
    Get hierarchy rank for a role.

    Returns NO_RANK for scoped roles and anything not in the hierarchy.
    """
    global_role = _as_global_role(role)
    if global_role is None:
        return NO_RANK
    return ROLE_HIERARCHY[global_role]


def has_minimum_rank(role: str | None, threshold: str) -> bool:
    """
    Check if role ranks at or above threshold.

    Both sides must be global roles; anything else fails.
    """
    role_rank = rank(role)
    threshold_rank = rank(threshold)
    if role_rank == NO_RANK or threshold_rank == NO_RANK:
        return False
    return role_rank >= threshold_rank


def get_role_display_name(role: str) -> str:
    """Human-readable name for a role (falls back to the raw value)."""
    return ROLE_DISPLAY_NAMES.get(role, role)
