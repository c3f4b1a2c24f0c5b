"""Role checks shared by registry services and presentation routes.

The creator flag on the user is the root of authority. Top admins act
platform-wide; course admins act only within the course their role is
scoped to.
"""

from __future__ import annotations

from registry.application.value_objects import CurrentUser
from registry.domain import CourseMembership, RoleKind


def is_privileged(actor: CurrentUser) -> bool:
    """Creator or top admin."""
    return actor.is_creator or actor.has_role(RoleKind.TOP_ADMIN)


def can_manage_course(actor: CurrentUser, course_id: str) -> bool:
    """Privileged, or a course admin scoped to this course."""
    return is_privileged(actor) or actor.has_role(RoleKind.COURSE_ADMIN, course_id)


def can_view_course(
    actor: CurrentUser, course_id: str, membership: CourseMembership | None
) -> bool:
    """Course managers always; everyone else needs an active membership."""
    if can_manage_course(actor, course_id):
        return True
    return (
        membership is not None
        and membership.course_id == course_id
        and membership.is_active
    )
