"""Domain exceptions for the registry bounded context.

These exceptions represent rule violations detected by registry services.
Presentation routes translate them into HTTP responses.
"""


class UnauthorizedError(Exception):
    """Raised when the acting user lacks the role an operation requires."""

    pass


class UserNotFoundError(Exception):
    """Raised when a referenced user does not exist."""

    pass


class UserBannedError(Exception):
    """Raised when a banned user attempts to use the platform."""

    pass


class CourseNotFoundError(Exception):
    """Raised when a referenced course does not exist or is not visible."""

    pass


class MembershipNotFoundError(Exception):
    """Raised when a referenced course membership does not exist."""

    pass


class DuplicateMembershipError(Exception):
    """Raised when a user is added to a course they already belong to."""

    pass


class DuplicateUsernameError(Exception):
    """Raised when a profile update would reuse another user's username."""

    pass


class CreatorProtectedError(Exception):
    """Raised when an operation would strip or alter the creator's authority.

    The creator flag is the sole source of super-admin authority; it cannot
    be granted, revoked, banned or demoted through the application.
    """

    pass


class InvalidRoleAssignmentError(Exception):
    """Raised when a role assignment is malformed (e.g. course_admin without
    a course scope)."""

    pass


class RoleNotFoundError(Exception):
    """Raised when a role to revoke does not exist."""

    pass


class InvalidSettingValueError(Exception):
    """Raised when a platform setting value does not match its key's schema."""

    pass


class NotificationNotFoundError(Exception):
    """Raised when a notification does not exist or belongs to another user."""

    pass


class PinnedPostNotFoundError(Exception):
    """Raised when a pinned post does not exist."""

    pass
