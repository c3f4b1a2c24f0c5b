"""SQLAlchemy ORM models for the registry bounded context.

These models map to registry tables and are used by repository
implementations. Course credentials are modelled by the tenancy context.
"""

from registry.infrastructure.models.content import (
    NotificationModel,
    PinnedPostModel,
    UserBadgeModel,
)
from registry.infrastructure.models.course import CourseModel
from registry.infrastructure.models.membership import CourseMembershipModel
from registry.infrastructure.models.role import RoleModel
from registry.infrastructure.models.setting import PlatformSettingModel
from registry.infrastructure.models.user import UserModel

__all__ = [
    "CourseMembershipModel",
    "CourseModel",
    "NotificationModel",
    "PinnedPostModel",
    "PlatformSettingModel",
    "RoleModel",
    "UserBadgeModel",
    "UserModel",
]
