"""Unit tests for the cross-course aggregator."""

from datetime import UTC, datetime, timedelta
from unittest.mock import create_autospec

import pytest

from community.domain import (
    AssignmentStatus,
    LifecycleState,
    Post,
    PostKind,
    UserStats,
)
from community.ports import ICourseContentRepository
from infrastructure.settings import InsightsSettings
from insights.application import CrossTenantAggregator
from insights.application.observability import AggregatorProbe
from insights.domain import Priority
from registry.domain import MembershipStatus
from registry.ports import IRegistryDirectory

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _assignment(post_id: str, course_id: str, deadline=None) -> Post:
    return Post(
        id=post_id,
        course_id=course_id,
        title=f"Assignment {post_id}",
        content="Do the thing",
        kind=PostKind.ASSIGNMENT,
        author_id="lecturer",
        deadline=deadline,
        media_urls=[],
        pinned=False,
        state=LifecycleState.ACTIVE,
        created_at=NOW,
        updated_at=NOW,
    )


def _status(post_id: str, course_id: str, user_id: str, completed=True):
    return AssignmentStatus(
        id=f"s-{post_id}",
        course_id=course_id,
        post_id=post_id,
        user_id=user_id,
        completed=completed,
        completed_at=NOW if completed else None,
        submission_note=None,
        updated_at=NOW,
    )


class Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock(NOW)


@pytest.fixture
def probe():
    return create_autospec(AggregatorProbe, instance=True)


@pytest.fixture
def directory(user_factory, course_factory, membership_factory):
    """Three users; alice is in three courses, bob in two, carol in one.

    bob's membership of course-c is suspended.
    """
    memberships = [
        membership_factory("alice", "course-a"),
        membership_factory("alice", "course-b"),
        membership_factory("alice", "course-c"),
        membership_factory("bob", "course-a"),
        membership_factory("bob", "course-c", MembershipStatus.SUSPENDED),
        membership_factory("carol", "course-b"),
    ]
    courses = {
        course_id: course_factory(course_id, name=f"Course {course_id[-1].upper()}")
        for course_id in ("course-a", "course-b", "course-c")
    }

    async def list_memberships(user_id=None):
        if user_id is None:
            return list(memberships)
        return [m for m in memberships if m.user_id == user_id]

    async def get_courses(course_ids):
        return {cid: courses[cid] for cid in course_ids if cid in courses}

    directory = create_autospec(IRegistryDirectory, instance=True)
    directory.list_users.return_value = [
        user_factory("alice", username="alice"),
        user_factory("bob", username="bob"),
        user_factory("carol", username="carol"),
    ]
    directory.list_memberships.side_effect = list_memberships
    directory.get_courses.side_effect = get_courses
    return directory


@pytest.fixture
def points():
    """Points per (course, user); course-c's database is unreachable."""
    return {
        ("course-a", "alice"): 120,
        ("course-b", "alice"): 30,
        ("course-a", "bob"): 400,
        ("course-c", "bob"): 1000,
        ("course-b", "carol"): 150,
    }


@pytest.fixture
def content(points):
    posts = {
        "course-a": [
            _assignment("a1", "course-a", NOW + timedelta(days=1)),
            _assignment("a2", "course-a", NOW + timedelta(days=10)),
        ],
        "course-b": [_assignment("b1", "course-b")],
    }
    statuses = {("course-a", "alice"): [_status("a1", "course-a", "alice")]}

    async def get_posts(course_id, limit=None, kind=None):
        return list(posts.get(course_id, []))

    async def get_user_stats(course_id, user_id):
        if course_id == "course-c":
            return None
        value = points.get((course_id, user_id))
        if value is None:
            return None
        return UserStats(course_id=course_id, user_id=user_id, points=value)

    async def get_user_assignment_statuses(course_id, user_id):
        return list(statuses.get((course_id, user_id), []))

    content = create_autospec(ICourseContentRepository, instance=True)
    content.get_posts.side_effect = get_posts
    content.get_user_stats.side_effect = get_user_stats
    content.get_user_assignment_statuses.side_effect = get_user_assignment_statuses
    return content


@pytest.fixture
def aggregator(directory, content, clock, probe) -> CrossTenantAggregator:
    return CrossTenantAggregator(
        directory=directory,
        content_repository=content,
        settings=InsightsSettings(fanout_concurrency=2, leaderboard_ttl_seconds=30),
        clock=clock,
        probe=probe,
    )


class TestDashboardStats:
    @pytest.mark.asyncio
    async def test_totals_across_courses_with_unreachable_course(self, aggregator):
        stats = await aggregator.dashboard_stats("alice")

        assert stats.total_courses == 3
        assert stats.total_assignments == 3
        assert stats.completed_assignments == 1
        assert stats.pending_assignments == 2
        assert stats.points == 150

    @pytest.mark.asyncio
    async def test_rank_comes_from_global_leaderboard(self, aggregator):
        assert (await aggregator.dashboard_stats("bob")).rank == 1
        assert (await aggregator.dashboard_stats("alice")).rank == 2
        assert (await aggregator.dashboard_stats("carol")).rank == 3

    @pytest.mark.asyncio
    async def test_suspended_membership_is_not_counted(self, aggregator):
        stats = await aggregator.dashboard_stats("bob")

        assert stats.total_courses == 1
        assert stats.points == 400

    @pytest.mark.asyncio
    async def test_failing_course_is_skipped(self, aggregator, content, probe):
        original = content.get_posts.side_effect

        async def get_posts(course_id, limit=None, kind=None):
            if course_id == "course-b":
                raise RuntimeError("connection reset")
            return await original(course_id, limit=limit, kind=kind)

        content.get_posts.side_effect = get_posts

        stats = await aggregator.dashboard_stats("alice")

        assert stats.total_courses == 3
        assert stats.total_assignments == 2
        probe.course_skipped.assert_called_once_with(
            "course-b", "dashboard_stats", "connection reset"
        )

    @pytest.mark.asyncio
    async def test_user_without_courses(self, aggregator, directory):
        stats = await aggregator.dashboard_stats("nobody")

        assert stats.total_courses == 0
        assert stats.total_assignments == 0
        assert stats.rank == 0


class TestAllAssignments:
    @pytest.mark.asyncio
    async def test_lists_assignments_in_course_order_with_priority(self, aggregator):
        views = await aggregator.all_assignments("alice")

        assert [v.id for v in views] == ["a1", "a2", "b1"]
        assert [v.is_completed for v in views] == [True, False, False]
        assert [v.priority for v in views] == [
            Priority.HIGH,
            Priority.LOW,
            Priority.MEDIUM,
        ]
        assert views[0].course == "Course A"
        assert views[0].submission_type == "Assignment"

    @pytest.mark.asyncio
    async def test_unreachable_course_contributes_nothing(self, aggregator):
        views = await aggregator.all_assignments("alice")

        assert all(v.course_id != "course-c" for v in views)


class TestGlobalLeaderboard:
    @pytest.mark.asyncio
    async def test_ranks_by_points_descending(self, aggregator):
        """Ties keep registry order: alice was registered before carol."""
        entries = await aggregator.global_leaderboard()

        assert [(e.user_id, e.points, e.rank) for e in entries] == [
            ("bob", 400, 1),
            ("alice", 150, 2),
            ("carol", 150, 3),
        ]

    @pytest.mark.asyncio
    async def test_badges_derive_from_points(self, aggregator):
        entries = {e.user_id: e for e in await aggregator.global_leaderboard()}

        assert entries["bob"].badges == 4
        assert entries["alice"].badges == 1

    @pytest.mark.asyncio
    async def test_suspended_course_points_are_excluded(self, aggregator, content):
        await aggregator.global_leaderboard()

        called = {c.args for c in content.get_user_stats.await_args_list}
        assert ("course-c", "bob") not in called

    @pytest.mark.asyncio
    async def test_result_is_cached_within_ttl(
        self, aggregator, directory, clock, probe
    ):
        first = await aggregator.global_leaderboard()
        clock.now = NOW + timedelta(seconds=29)
        second = await aggregator.global_leaderboard()

        assert first == second
        assert directory.list_users.await_count == 1
        probe.leaderboard_cache_hit.assert_called_once()

    @pytest.mark.asyncio
    async def test_recomputed_after_ttl(self, aggregator, directory, clock, points):
        await aggregator.global_leaderboard()
        points[("course-b", "carol")] = 900
        clock.now = NOW + timedelta(seconds=31)

        entries = await aggregator.global_leaderboard()

        assert directory.list_users.await_count == 2
        assert entries[0].user_id == "carol"

    @pytest.mark.asyncio
    async def test_invalidate_forces_recompute(self, aggregator, directory):
        await aggregator.global_leaderboard()
        aggregator.invalidate_leaderboard()
        await aggregator.global_leaderboard()

        assert directory.list_users.await_count == 2
