"""
Assignment resolution.

Two explicit phases:
1. expand_parent_scope: course id -> section ids
2. find_assignment: user + section id(s) -> assignment

Both are plain reads against an AssignmentStore. Nothing here writes,
caches, or retries, and store errors are not caught.
"""

from collections.abc import Iterable

import structlog

from .interfaces import Assignment, AssignmentStore

logger = structlog.get_logger()


class AssignmentResolver:
    """Resolves whether a user holds an assignment for a requested scope."""

    def __init__(self, store: AssignmentStore):
        self.store = store

    async def expand_parent_scope(self, parent_id: str) -> frozenset[str]:
        """
        Expand a course id into the ids of its sections.

        A course without sections yields an empty set, not an error.
        """
        section_ids = frozenset(
            await self.store.list_direct_scope_ids_for_parent(parent_id)
        )
        logger.debug(
            "authorization.scope_expanded",
            course_id=parent_id,
            section_count=len(section_ids),
        )
        return section_ids

    async def find_assignment(
        self,
        user_id: str,
        resource: str | Iterable[str],
    ) -> Assignment | None:
        """
        Find an assignment for user_id on a section or any of a set of sections.

        Args:
            user_id: Principal id
            resource: One section id, or an iterable of section ids

        Returns:
            The matching Assignment, or None
        """
        if isinstance(resource, str):
            resource_ids = [resource]
        else:
            resource_ids = sorted(set(resource))

        if not resource_ids:
            return None

        return await self.store.find_assignment_for_user_and_scopes(user_id, resource_ids)
