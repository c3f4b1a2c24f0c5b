"""Unit test fixtures with mocked dependencies."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import SecretStr

from registry.application.value_objects import CurrentUser
from registry.domain import (
    Course,
    CourseMembership,
    CourseRole,
    MembershipStatus,
    Role,
    RoleKind,
    User,
)
from tenancy.domain import CourseCredentials

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def make_user(user_id: str = "user-1", **overrides) -> User:
    fields = {
        "id": user_id,
        "username": f"name-{user_id}",
        "email": f"{user_id}@example.com",
        "is_creator": False,
        "is_banned": False,
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return User(**fields)


def make_role(
    user_id: str, kind: RoleKind, scope: str | None = None, role_id: str = "role-1"
) -> Role:
    return Role(
        id=role_id,
        user_id=user_id,
        kind=kind,
        scope=scope,
        assigned_by=None,
        created_at=NOW,
    )


def make_course(course_id: str = "course-1", **overrides) -> Course:
    fields = {
        "id": course_id,
        "name": f"Course {course_id}",
        "description": None,
        "lecturer": None,
        "course_rep": None,
        "is_active": True,
        "created_by": "root",
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Course(**fields)


def make_membership(
    user_id: str = "user-1",
    course_id: str = "course-1",
    status: MembershipStatus = MembershipStatus.ACTIVE,
    membership_id: str | None = None,
) -> CourseMembership:
    return CourseMembership(
        id=membership_id or f"m-{user_id}-{course_id}",
        user_id=user_id,
        course_id=course_id,
        role=CourseRole.STUDENT,
        status=status,
        joined_at=NOW,
    )


def make_current_user(
    user_id: str = "user-1",
    is_creator: bool = False,
    roles: tuple[tuple[RoleKind, str | None], ...] = (),
) -> CurrentUser:
    return CurrentUser(
        user=make_user(user_id, is_creator=is_creator),
        roles=tuple(
            make_role(user_id, kind, scope, role_id=f"role-{i}")
            for i, (kind, scope) in enumerate(roles)
        ),
    )


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def role_factory():
    return make_role


@pytest.fixture
def course_factory():
    return make_course


@pytest.fixture
def membership_factory():
    return make_membership


@pytest.fixture
def current_user_factory():
    return make_current_user


@pytest.fixture
def mock_session():
    """Create mock async session with transaction support."""
    session = AsyncMock()
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)
    return session


@pytest.fixture
def credentials() -> CourseCredentials:
    return CourseCredentials(
        endpoint="https://abcd.supabase.co",
        public_key="anon-key",
        service_key=SecretStr("service-secret"),
    )
