"""Domain layer for the registry bounded context."""

from registry.domain.entities import (
    Course,
    CourseMembership,
    Notification,
    PinnedPost,
    PlatformSetting,
    Role,
    User,
    UserBadge,
)
from registry.domain.value_objects import CourseRole, MembershipStatus, RoleKind

__all__ = [
    "Course",
    "CourseMembership",
    "CourseRole",
    "MembershipStatus",
    "Notification",
    "PinnedPost",
    "PlatformSetting",
    "Role",
    "RoleKind",
    "User",
    "UserBadge",
]
