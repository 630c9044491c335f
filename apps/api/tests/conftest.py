"""
Pytest fixtures for testing.

Provides:
- Async database session with rollback
- Test client with token helpers
- Factory fixtures for courses, sections, lessons, assignments and enrollments
- In-memory and instrumented assignment stores
"""

from collections.abc import Iterable
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from scopeguard.main import app
from scopeguard.core.config import settings
from scopeguard.core.auth.interfaces import Assignment, AssignmentStore, Enrollment, EnrollmentStore
from scopeguard.core.auth.stores.memory import MemoryAssignmentStore, MemoryEnrollmentStore
from scopeguard.models.base import Base
from scopeguard.models.course import (
    Course,
    CourseEnrollment,
    CourseLesson,
    CourseSection,
    InstructorAssignment,
)
from scopeguard.api.dependencies.database import get_db


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create database session with automatic rollback.

    Each test gets a fresh transaction that's rolled back after.
    """
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client with database session override.
    """

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============ Factory Fixtures ============


class CourseFactory:
    """Factory for creating courses with sections."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        title: str = "Test Course",
        section_ids: Iterable[str] = (),
        course_id: str | None = None,
    ) -> Course:
        """Create a course and the given sections."""
        course = Course(id=course_id or str(uuid4()), title=title)
        self.db.add(course)
        for section_id in section_ids:
            self.db.add(
                CourseSection(id=section_id, course_id=course.id, title=f"Section {section_id}")
            )
        await self.db.commit()
        return course


class AssignmentFactory:
    """Factory for creating instructor assignments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user_id: str, section_id: str) -> InstructorAssignment:
        assignment = InstructorAssignment(user_id=user_id, course_section_id=section_id)
        self.db.add(assignment)
        await self.db.commit()
        await self.db.refresh(assignment)
        return assignment


class LessonFactory:
    """Factory for creating lessons."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, section_id: str, lesson_id: str | None = None) -> CourseLesson:
        lesson = CourseLesson(id=lesson_id or str(uuid4()), section_id=section_id, title="Lesson")
        self.db.add(lesson)
        await self.db.commit()
        return lesson


class EnrollmentFactory:
    """Factory for creating enrollments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user_id: str, course_id: str, status: str = "active") -> CourseEnrollment:
        enrollment = CourseEnrollment(user_id=user_id, course_id=course_id, status=status)
        self.db.add(enrollment)
        await self.db.commit()
        await self.db.refresh(enrollment)
        return enrollment


@pytest_asyncio.fixture
async def course_factory(db: AsyncSession) -> CourseFactory:
    """Fixture that provides CourseFactory."""
    return CourseFactory(db)


@pytest_asyncio.fixture
async def assignment_factory(db: AsyncSession) -> AssignmentFactory:
    """Fixture that provides AssignmentFactory."""
    return AssignmentFactory(db)


@pytest_asyncio.fixture
async def lesson_factory(db: AsyncSession) -> LessonFactory:
    """Fixture that provides LessonFactory."""
    return LessonFactory(db)


@pytest_asyncio.fixture
async def enrollment_factory(db: AsyncSession) -> EnrollmentFactory:
    """Fixture that provides EnrollmentFactory."""
    return EnrollmentFactory(db)


# ============ Auth Helpers ============


def make_token(sub: str | None, role: str | None) -> str:
    """Sign a token the way the identity service does."""
    claims = {}
    if sub is not None:
        claims["sub"] = sub
    if role is not None:
        claims["role"] = role
    return jwt.encode(claims, settings.auth.secret_key, algorithm=settings.auth.algorithm)


def auth_headers(sub: str | None, role: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, role)}"}


# ============ Store Doubles ============


class RecordingStore(AssignmentStore):
    """Wraps a store and records every read."""

    def __init__(self, inner: AssignmentStore):
        self.inner = inner
        self.calls: list[tuple] = []

    async def list_direct_scope_ids_for_parent(self, parent_id: str) -> list[str]:
        self.calls.append(("list_direct_scope_ids_for_parent", parent_id))
        return await self.inner.list_direct_scope_ids_for_parent(parent_id)

    async def find_assignment_for_user_and_scopes(
        self,
        user_id: str,
        resource_ids: Iterable[str],
    ) -> Assignment | None:
        resource_ids = list(resource_ids)
        self.calls.append(("find_assignment_for_user_and_scopes", user_id, tuple(resource_ids)))
        return await self.inner.find_assignment_for_user_and_scopes(user_id, resource_ids)


class StoreUnavailable(Exception):
    """Raised by FailingStore in place of a driver error."""


class FailingStore(AssignmentStore, EnrollmentStore):
    """
    Store whose every read fails, like a dropped connection.

    Always raises the same `error` instance so callers can check it
    arrives unchanged.
    """

    def __init__(self):
        self.error = StoreUnavailable("connection refused")

    async def list_direct_scope_ids_for_parent(self, parent_id: str) -> list[str]:
        raise self.error

    async def find_assignment_for_user_and_scopes(
        self,
        user_id: str,
        resource_ids: Iterable[str],
    ) -> Assignment | None:
        raise self.error

    async def get_course_id_for_enrollment(self, enrollment_id: str) -> str | None:
        raise self.error

    async def get_course_id_for_lesson(self, lesson_id: str) -> str | None:
        raise self.error

    async def get_course_id_for_section(self, section_id: str) -> str | None:
        raise self.error

    async def find_active_enrollment(self, user_id: str, course_id: str) -> Enrollment | None:
        raise self.error


@pytest.fixture
def memory_store() -> MemoryAssignmentStore:
    """Memory store seeded with course c1 = {s1, s2}. Any other course has no sections."""
    store = MemoryAssignmentStore()
    store.add_section("c1", "s1")
    store.add_section("c1", "s2")
    return store


@pytest.fixture
def enrollment_store() -> MemoryEnrollmentStore:
    """Enrollment store with course c1 = {s1 (lesson l1), s2}."""
    store = MemoryEnrollmentStore()
    store.add_section("c1", "s1")
    store.add_section("c1", "s2")
    store.add_lesson("s1", "l1")
    return store


@pytest.fixture
def recording_store(memory_store: MemoryAssignmentStore) -> RecordingStore:
    """Memory store whose reads are recorded in `calls`."""
    return RecordingStore(memory_store)


@pytest.fixture
def failing_store() -> FailingStore:
    """Store that fails every read."""
    return FailingStore()


@pytest.fixture
def headers_for():
    """Build Authorization headers for a (sub, role) pair."""
    return auth_headers
