"""Ports (interfaces) for the registry bounded context.

Ports define the contracts for repositories and collaborators without
specifying implementation details.
"""

from registry.ports.collaborators import (
    IRegistryDirectory,
    ISchemaProvisioner,
    ITenantHandleInvalidator,
)
from registry.ports.exceptions import (
    CourseNotFoundError,
    CreatorProtectedError,
    DuplicateMembershipError,
    DuplicateUsernameError,
    InvalidRoleAssignmentError,
    InvalidSettingValueError,
    MembershipNotFoundError,
    NotificationNotFoundError,
    PinnedPostNotFoundError,
    RoleNotFoundError,
    UnauthorizedError,
    UserBannedError,
    UserNotFoundError,
)
from registry.ports.repositories import (
    IBadgeRepository,
    ICourseRepository,
    IMembershipRepository,
    INotificationRepository,
    IPinnedPostRepository,
    IRoleRepository,
    ISettingsRepository,
    IUserRepository,
)

__all__ = [
    "CourseNotFoundError",
    "CreatorProtectedError",
    "DuplicateMembershipError",
    "DuplicateUsernameError",
    "IBadgeRepository",
    "ICourseRepository",
    "IMembershipRepository",
    "INotificationRepository",
    "IPinnedPostRepository",
    "IRegistryDirectory",
    "IRoleRepository",
    "ISchemaProvisioner",
    "ISettingsRepository",
    "ITenantHandleInvalidator",
    "IUserRepository",
    "InvalidRoleAssignmentError",
    "InvalidSettingValueError",
    "MembershipNotFoundError",
    "NotificationNotFoundError",
    "PinnedPostNotFoundError",
    "RoleNotFoundError",
    "UnauthorizedError",
    "UserBannedError",
    "UserNotFoundError",
]
