"""
Tests for assignment and enrollment store backends.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from scopeguard.core.auth.interfaces import Assignment, Enrollment, Principal, Outcome, ScopeParams
from scopeguard.core.auth.guard import InstructorGuard
from scopeguard.core.auth.registry import AuthRegistry
from scopeguard.core.auth.stores import (
    DatabaseAssignmentStore,
    DatabaseEnrollmentStore,
    MemoryAssignmentStore,
    MemoryEnrollmentStore,
)
from scopeguard.repositories.course import CourseSectionRepository


def test_default_stores_registered():
    """Test built-in stores are registered."""
    assert AuthRegistry.has_assignment_store("database")
    assert AuthRegistry.has_assignment_store("memory")
    assert {"database", "memory"} <= set(AuthRegistry.list_assignment_stores())


def test_unknown_store_name():
    """Test unknown store names fail loudly."""
    with pytest.raises(ValueError, match="Unknown assignment store: 'redis'"):
        AuthRegistry.get_assignment_store("redis")


def test_registry_builds_memory_store():
    """Test registry builds a store by name."""
    assert isinstance(AuthRegistry.get_assignment_store("memory"), MemoryAssignmentStore)


@pytest.mark.asyncio
async def test_database_lists_course_sections(db: AsyncSession, course_factory):
    """Test section ids are listed per course."""
    course = await course_factory.create(section_ids=["s1", "s2"])
    await course_factory.create(section_ids=["s3"])
    store = DatabaseAssignmentStore(db=db)

    section_ids = await store.list_direct_scope_ids_for_parent(course.id)

    assert sorted(section_ids) == ["s1", "s2"]


@pytest.mark.asyncio
async def test_database_course_without_sections(db: AsyncSession, course_factory):
    """Test course without sections lists nothing."""
    course = await course_factory.create()
    store = DatabaseAssignmentStore(db=db)

    assert await store.list_direct_scope_ids_for_parent(course.id) == []


@pytest.mark.asyncio
async def test_database_finds_assignment(db: AsyncSession, course_factory, assignment_factory):
    """Test assignment lookup maps the row."""
    await course_factory.create(section_ids=["s1", "s2"])
    model = await assignment_factory.create(user_id="inst-1", section_id="s2")
    store = DatabaseAssignmentStore(db=db)

    found = await store.find_assignment_for_user_and_scopes("inst-1", ["s1", "s2"])

    assert found == Assignment(id=model.id, user_id="inst-1", resource_id="s2")


@pytest.mark.asyncio
async def test_database_ignores_other_users_and_sections(
    db: AsyncSession,
    course_factory,
    assignment_factory,
):
    """Test lookup filters by user and section."""
    await course_factory.create(section_ids=["s1", "s2"])
    await assignment_factory.create(user_id="inst-2", section_id="s1")
    await assignment_factory.create(user_id="inst-1", section_id="s2")
    store = DatabaseAssignmentStore(db=db)

    assert await store.find_assignment_for_user_and_scopes("inst-1", ["s1"]) is None


@pytest.mark.asyncio
async def test_guard_over_database(db: AsyncSession, course_factory, assignment_factory):
    """Test guard end to end over SQLite."""
    course = await course_factory.create(section_ids=["s1", "s2"])
    await assignment_factory.create(user_id="inst-1", section_id="s1")
    guard = InstructorGuard(DatabaseAssignmentStore(db=db))
    principal = Principal(id="inst-1", global_role="instructor")

    by_course = await guard.evaluate(principal, ScopeParams(course_id=course.id))
    by_section = await guard.evaluate(principal, ScopeParams(section_id="s2"))

    assert by_course.outcome == Outcome.ALLOWED_BY_ASSIGNMENT
    assert by_course.assignment.resource_id == "s1"
    assert by_section.outcome == Outcome.DENIED_NO_DIRECT_ASSIGNMENT


@pytest.mark.asyncio
async def test_memory_store_round_trip():
    """Test memory store helpers and reads."""
    store = MemoryAssignmentStore()
    store.add_section("c1", "s1")
    assignment = store.add_assignment("inst-1", "s1", assignment_id="a-1")

    assert await store.list_direct_scope_ids_for_parent("c1") == ["s1"]
    assert await store.find_assignment_for_user_and_scopes("inst-1", ["s1"]) == assignment
    assert assignment.id == "a-1"


@pytest.mark.asyncio
async def test_section_repository_get_by_id(db: AsyncSession, course_factory):
    """Test section lookup by id."""
    course = await course_factory.create(section_ids=["s1"])
    repo = CourseSectionRepository(db)

    section = await repo.get_by_id("s1")

    assert section.course_id == course.id
    assert await repo.get_by_id("missing") is None


# ============ Enrollment stores ============


def test_enrollment_stores_registered():
    """Test built-in enrollment stores are registered."""
    assert AuthRegistry.has_enrollment_store("database")
    assert AuthRegistry.has_enrollment_store("memory")
    assert isinstance(AuthRegistry.get_enrollment_store("memory"), MemoryEnrollmentStore)


def test_unknown_enrollment_store_name():
    """Test unknown enrollment store names fail loudly."""
    with pytest.raises(ValueError, match="Unknown enrollment store: 'ldap'"):
        AuthRegistry.get_enrollment_store("ldap")


@pytest.mark.asyncio
async def test_database_resolves_content_to_course(
    db: AsyncSession,
    course_factory,
    lesson_factory,
    enrollment_factory,
):
    """Test enrollment, lesson and section ids map to their course."""
    course = await course_factory.create(section_ids=["s1"])
    await lesson_factory.create(section_id="s1", lesson_id="l1")
    enrollment = await enrollment_factory.create(user_id="learner-1", course_id=course.id)
    store = DatabaseEnrollmentStore(db=db)

    assert await store.get_course_id_for_enrollment(enrollment.id) == course.id
    assert await store.get_course_id_for_lesson("l1") == course.id
    assert await store.get_course_id_for_section("s1") == course.id
    assert await store.get_course_id_for_enrollment("missing") is None
    assert await store.get_course_id_for_lesson("missing") is None
    assert await store.get_course_id_for_section("missing") is None


@pytest.mark.asyncio
async def test_database_finds_only_active_enrollment(
    db: AsyncSession,
    course_factory,
    enrollment_factory,
):
    """Test suspended enrollments are invisible to the lookup."""
    active_course = await course_factory.create()
    suspended_course = await course_factory.create()
    active = await enrollment_factory.create(user_id="learner-1", course_id=active_course.id)
    await enrollment_factory.create(
        user_id="learner-1",
        course_id=suspended_course.id,
        status="suspended",
    )
    store = DatabaseEnrollmentStore(db=db)

    found = await store.find_active_enrollment("learner-1", active_course.id)

    assert found == Enrollment(
        id=active.id,
        user_id="learner-1",
        course_id=active_course.id,
        status="active",
    )
    assert await store.find_active_enrollment("learner-1", suspended_course.id) is None
    assert await store.find_active_enrollment("learner-2", active_course.id) is None
