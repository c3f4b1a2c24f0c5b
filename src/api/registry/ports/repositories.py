"""Repository ports for the registry bounded context.

Implementations work inside the caller's ``AsyncSession``; they flush but
never commit. Services own the transaction.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from registry.domain import (
    Course,
    CourseMembership,
    CourseRole,
    MembershipStatus,
    Notification,
    PinnedPost,
    PlatformSetting,
    Role,
    RoleKind,
    User,
    UserBadge,
)


@runtime_checkable
class IUserRepository(Protocol):
    """Persistence for platform users."""

    async def add(self, user_id: str, username: str, email: str) -> User:
        """Create a user (never a creator)."""
        ...

    async def get_by_id(self, user_id: str) -> User | None:
        ...

    async def get_by_username(self, username: str) -> User | None:
        ...

    async def get_by_email(self, email: str) -> User | None:
        ...

    async def list_all(self) -> list[User]:
        """List every user, oldest first."""
        ...

    async def update_profile(
        self,
        user_id: str,
        username: str | None = None,
        email: str | None = None,
    ) -> User | None:
        """Change username and/or email. None when the user does not exist."""
        ...

    async def set_banned(self, user_id: str, banned: bool) -> User | None:
        """Set the banned flag. None when the user does not exist."""
        ...


@runtime_checkable
class IRoleRepository(Protocol):
    """Persistence for role grants."""

    async def add(
        self,
        user_id: str,
        kind: RoleKind,
        scope: str | None = None,
        assigned_by: str | None = None,
    ) -> Role:
        ...

    async def get_by_id(self, role_id: str) -> Role | None:
        ...

    async def list_for_user(self, user_id: str) -> list[Role]:
        ...

    async def delete(self, role_id: str) -> bool:
        """Remove a role grant. False when it does not exist."""
        ...


@runtime_checkable
class ICourseRepository(Protocol):
    """Persistence for the course catalogue."""

    async def add(
        self,
        name: str,
        created_by: str,
        description: str | None = None,
        lecturer: str | None = None,
        course_rep: str | None = None,
    ) -> Course:
        ...

    async def get_by_id(self, course_id: str) -> Course | None:
        ...

    async def get_many(self, course_ids: list[str]) -> list[Course]:
        """Fetch the courses with the given ids (unknown ids are skipped)."""
        ...

    async def list_all(self, include_inactive: bool = False) -> list[Course]:
        """List courses, oldest first."""
        ...

    async def update(self, course_id: str, **changes: Any) -> Course | None:
        """Apply column changes. None when the course does not exist."""
        ...


@runtime_checkable
class IMembershipRepository(Protocol):
    """Persistence for course memberships."""

    async def add(
        self, user_id: str, course_id: str, role: CourseRole = CourseRole.STUDENT
    ) -> CourseMembership:
        ...

    async def get_by_id(self, membership_id: str) -> CourseMembership | None:
        ...

    async def get(self, user_id: str, course_id: str) -> CourseMembership | None:
        ...

    async def list_for_user(self, user_id: str) -> list[CourseMembership]:
        """List a user's memberships in join order."""
        ...

    async def list_for_course(self, course_id: str) -> list[CourseMembership]:
        ...

    async def list_all(self) -> list[CourseMembership]:
        """List every membership in join order."""
        ...

    async def update_status(
        self, membership_id: str, status: MembershipStatus
    ) -> CourseMembership | None:
        ...

    async def delete(self, membership_id: str) -> bool:
        ...


@runtime_checkable
class ISettingsRepository(Protocol):
    """Persistence for platform settings."""

    async def get(self, key: str) -> PlatformSetting | None:
        ...

    async def list_all(self) -> list[PlatformSetting]:
        ...

    async def upsert(self, key: str, value: Any, updated_by: str) -> PlatformSetting:
        """Insert or replace a setting."""
        ...


@runtime_checkable
class INotificationRepository(Protocol):
    """Persistence for user notifications."""

    async def add(
        self,
        user_id: str,
        title: str,
        message: str,
        kind: str,
        data: dict[str, Any] | None = None,
    ) -> Notification:
        ...

    async def list_for_user(self, user_id: str) -> list[Notification]:
        """List a user's notifications, oldest first."""
        ...

    async def mark_read(
        self, notification_id: str, user_id: str
    ) -> Notification | None:
        """Mark one of the user's notifications read. None when not theirs."""
        ...


@runtime_checkable
class IPinnedPostRepository(Protocol):
    """Persistence for platform-wide pinned posts."""

    async def add(self, title: str, content: str, author_id: str) -> PinnedPost:
        ...

    async def list_pinned(self) -> list[PinnedPost]:
        """List posts that are currently pinned, oldest first."""
        ...

    async def update(self, post_id: str, **changes: Any) -> PinnedPost | None:
        ...

    async def delete(self, post_id: str) -> bool:
        ...


@runtime_checkable
class IBadgeRepository(Protocol):
    """Persistence for awarded badges."""

    async def add(
        self,
        user_id: str,
        badge_type: str,
        badge_data: dict[str, Any] | None = None,
        course_id: str | None = None,
    ) -> UserBadge:
        ...

    async def list_for_user(self, user_id: str) -> list[UserBadge]:
        ...
