"""Registry entities.

The registry is the single shared database: users, their roles, the course
catalogue, memberships, platform settings and global content.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from registry.domain.value_objects import CourseRole, MembershipStatus, RoleKind


@dataclass(frozen=True)
class User:
    """A platform user.

    The id is the identity provider's user id. ``is_creator`` is set outside
    the application and never changes through it.
    """

    id: str
    username: str
    email: str
    is_creator: bool
    is_banned: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Role:
    """A role held by a user, optionally scoped to one course."""

    id: str
    user_id: str
    kind: RoleKind
    scope: str | None
    assigned_by: str | None
    created_at: datetime


@dataclass(frozen=True)
class Course:
    """A course (tenant) in the catalogue. Inactive courses are hidden."""

    id: str
    name: str
    description: str | None
    lecturer: str | None
    course_rep: str | None
    is_active: bool
    created_by: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class CourseMembership:
    """A user's enrolment in a course."""

    id: str
    user_id: str
    course_id: str
    role: CourseRole
    status: MembershipStatus
    joined_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE


@dataclass(frozen=True)
class PlatformSetting:
    """A global key -> value setting and who last changed it."""

    key: str
    value: Any
    updated_by: str
    updated_at: datetime


@dataclass(frozen=True)
class Notification:
    """A message addressed to one user."""

    id: str
    user_id: str
    title: str
    message: str
    kind: str
    data: dict[str, Any] | None
    is_read: bool
    created_at: datetime


@dataclass(frozen=True)
class PinnedPost:
    """A platform-wide announcement."""

    id: str
    title: str
    content: str
    author_id: str
    is_pinned: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserBadge:
    """An achievement awarded to a user, globally or within one course."""

    id: str
    user_id: str
    badge_type: str
    badge_data: dict[str, Any] | None
    course_id: str | None
    earned_at: datetime
