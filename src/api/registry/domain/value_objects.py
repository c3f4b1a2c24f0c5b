"""Value objects for the registry domain."""

from __future__ import annotations

from enum import StrEnum


class RoleKind(StrEnum):
    """Platform roles.

    ``CREATOR`` mirrors the immutable creator flag on the user; it is never
    granted or revoked through role assignment.
    """

    CREATOR = "creator"
    TOP_ADMIN = "top_admin"
    COURSE_ADMIN = "course_admin"
    USER = "user"


class MembershipStatus(StrEnum):
    """Whether a course membership currently grants access."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class CourseRole(StrEnum):
    """A member's role within one course."""

    STUDENT = "student"
    COURSE_ADMIN = "course_admin"
