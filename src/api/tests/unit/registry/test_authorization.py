"""Unit tests for registry role checks."""

from datetime import UTC, datetime

import pytest

from registry.application.authorization import (
    can_manage_course,
    can_view_course,
    is_privileged,
)
from registry.domain import CourseMembership, CourseRole, MembershipStatus, RoleKind


def _membership(course_id: str, status: MembershipStatus) -> CourseMembership:
    return CourseMembership(
        id="m-1",
        user_id="user-1",
        course_id=course_id,
        role=CourseRole.STUDENT,
        status=status,
        joined_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


class TestIsPrivileged:
    def test_creator_flag_is_privileged(self, current_user_factory):
        assert is_privileged(current_user_factory(is_creator=True))

    def test_top_admin_is_privileged(self, current_user_factory):
        assert is_privileged(current_user_factory(roles=((RoleKind.TOP_ADMIN, None),)))

    @pytest.mark.parametrize(
        "roles",
        [(), ((RoleKind.USER, None),), ((RoleKind.COURSE_ADMIN, "course-1"),)],
    )
    def test_other_users_are_not(self, current_user_factory, roles):
        assert not is_privileged(current_user_factory(roles=roles))


class TestCanManageCourse:
    def test_course_admin_manages_own_course_only(self, current_user_factory):
        actor = current_user_factory(roles=((RoleKind.COURSE_ADMIN, "course-1"),))

        assert can_manage_course(actor, "course-1")
        assert not can_manage_course(actor, "course-2")

    def test_top_admin_manages_every_course(self, current_user_factory):
        actor = current_user_factory(roles=((RoleKind.TOP_ADMIN, None),))

        assert can_manage_course(actor, "course-1")
        assert can_manage_course(actor, "course-2")


class TestCanViewCourse:
    def test_active_member_can_view(self, current_user_factory):
        membership = _membership("course-1", MembershipStatus.ACTIVE)

        assert can_view_course(current_user_factory(), "course-1", membership)

    def test_suspended_member_cannot_view(self, current_user_factory):
        membership = _membership("course-1", MembershipStatus.SUSPENDED)

        assert not can_view_course(current_user_factory(), "course-1", membership)

    def test_membership_of_another_course_does_not_count(self, current_user_factory):
        membership = _membership("course-2", MembershipStatus.ACTIVE)

        assert not can_view_course(current_user_factory(), "course-1", membership)

    def test_manager_needs_no_membership(self, current_user_factory):
        actor = current_user_factory(roles=((RoleKind.COURSE_ADMIN, "course-1"),))

        assert can_view_course(actor, "course-1", None)
