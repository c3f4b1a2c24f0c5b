"""Cross-course aggregation of dashboards, assignments and the leaderboard.

Registry data (users, memberships, courses) is read through a directory;
course data through the content repository, one course database at a time.
Per-course reads run concurrently under a semaphore. A course that cannot
be read contributes nothing: the repository already degrades unavailable
courses to empty results, and any other exception from one course is
logged and skipped so it never fails the whole view.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import TypeVar

from community.domain import PostKind, UserStats
from community.ports import ICourseContentRepository
from infrastructure.settings import InsightsSettings
from insights.application.observability import AggregatorProbe, DefaultAggregatorProbe
from insights.domain import (
    AssignmentView,
    DashboardStats,
    LeaderboardEntry,
    badges_for,
    derive_priority,
)
from registry.domain import Course, CourseMembership
from registry.ports import IRegistryDirectory

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class CrossTenantAggregator:
    """Composes registry-level views from many course databases.

    The aggregator is process-scoped: it holds the cached global leaderboard
    and shares it between requests.
    """

    def __init__(
        self,
        directory: IRegistryDirectory,
        content_repository: ICourseContentRepository,
        settings: InsightsSettings | None = None,
        clock: Callable[[], datetime] = _utc_now,
        probe: AggregatorProbe | None = None,
    ):
        settings = settings or InsightsSettings()
        self._directory = directory
        self._content = content_repository
        self._clock = clock
        self._probe = probe or DefaultAggregatorProbe()
        self._semaphore = asyncio.Semaphore(settings.fanout_concurrency)
        self._leaderboard_ttl = timedelta(seconds=settings.leaderboard_ttl_seconds)
        self._leaderboard: list[LeaderboardEntry] | None = None
        self._leaderboard_fetched_at: datetime | None = None
        self._leaderboard_lock = asyncio.Lock()

    async def dashboard_stats(self, user_id: str) -> DashboardStats:
        """Totals over the user's active courses.

        Unreachable courses count towards ``total_courses`` (they are still
        the user's courses) but add nothing to the assignment totals.
        """
        courses = await self._courses_of(user_id)

        async def course_totals(course: Course) -> tuple[int, int, int]:
            assignments = await self._content.get_posts(
                course.id, kind=PostKind.ASSIGNMENT
            )
            stats = await self._content.get_user_stats(course.id, user_id)
            points = stats.points if stats else 0
            if not assignments:
                return 0, 0, points
            assignment_ids = {post.id for post in assignments}
            statuses = await self._content.get_user_assignment_statuses(
                course.id, user_id
            )
            completed = sum(
                1 for s in statuses if s.completed and s.post_id in assignment_ids
            )
            return len(assignments), completed, points

        results = await self._fan_out(
            courses, "dashboard_stats", course_totals, default=(0, 0, 0)
        )
        total = sum(r[0] for r in results)
        completed = sum(r[1] for r in results)
        points = sum(r[2] for r in results)

        leaderboard = await self.global_leaderboard()
        rank = next((e.rank for e in leaderboard if e.user_id == user_id), 0)

        self._probe.dashboard_computed(user_id, len(courses))
        return DashboardStats(
            total_courses=len(courses),
            total_assignments=total,
            completed_assignments=completed,
            pending_assignments=total - completed,
            rank=rank,
            points=points,
        )

    async def all_assignments(self, user_id: str) -> list[AssignmentView]:
        """Every assignment in the user's courses, in course then post order."""
        courses = await self._courses_of(user_id)
        now = self._clock()

        async def course_assignments(course: Course) -> list[AssignmentView]:
            posts = await self._content.get_posts(course.id, kind=PostKind.ASSIGNMENT)
            if not posts:
                return []
            statuses = await self._content.get_user_assignment_statuses(
                course.id, user_id
            )
            completed = {s.post_id for s in statuses if s.completed}
            return [
                AssignmentView(
                    id=post.id,
                    title=post.title,
                    course=course.name,
                    course_id=course.id,
                    due_date=post.deadline,
                    description=post.content,
                    is_completed=post.id in completed,
                    priority=derive_priority(post.deadline, now),
                )
                for post in posts
            ]

        results = await self._fan_out(
            courses, "all_assignments", course_assignments, default=[]
        )
        return [view for views in results for view in views]

    async def global_leaderboard(self) -> list[LeaderboardEntry]:
        """Every user ranked by points summed over their active courses.

        The result is reused for the configured TTL. Ties keep the registry's
        user order.
        """
        if self._leaderboard_is_fresh():
            self._probe.leaderboard_cache_hit()
            return list(self._leaderboard or [])

        async with self._leaderboard_lock:
            if self._leaderboard_is_fresh():
                self._probe.leaderboard_cache_hit()
                return list(self._leaderboard or [])

            entries = await self._compute_leaderboard()
            self._leaderboard = entries
            self._leaderboard_fetched_at = self._clock()
            return list(entries)

    def invalidate_leaderboard(self) -> None:
        self._leaderboard = None
        self._leaderboard_fetched_at = None

    def _leaderboard_is_fresh(self) -> bool:
        if self._leaderboard is None or self._leaderboard_fetched_at is None:
            return False
        return (self._clock() - self._leaderboard_fetched_at) < self._leaderboard_ttl

    async def _compute_leaderboard(self) -> list[LeaderboardEntry]:
        started = time.perf_counter()
        users = await self._directory.list_users()
        memberships = [m for m in await self._directory.list_memberships() if m.is_active]
        courses = await self._directory.get_courses(
            list(dict.fromkeys(m.course_id for m in memberships))
        )

        by_user: dict[str, list[str]] = {}
        for membership in memberships:
            course = courses.get(membership.course_id)
            if course is not None and course.is_active:
                by_user.setdefault(membership.user_id, []).append(course.id)

        pairs = [
            (user.id, course_id)
            for user in users
            for course_id in by_user.get(user.id, [])
        ]

        async def stats_for(pair: tuple[str, str]) -> UserStats | None:
            user_id, course_id = pair
            return await self._content.get_user_stats(course_id, user_id)

        stats = await self._fan_out(
            pairs, "global_leaderboard", stats_for, default=None, key=lambda p: p[1]
        )

        points: dict[str, int] = {}
        contributions: dict[str, int] = {}
        for (user_id, _), user_stats in zip(pairs, stats):
            if user_stats is None:
                continue
            points[user_id] = points.get(user_id, 0) + user_stats.points
            contributions[user_id] = (
                contributions.get(user_id, 0) + user_stats.contributions
            )

        # sorted() is stable, so equal points keep registry order.
        ranked = sorted(users, key=lambda u: points.get(u.id, 0), reverse=True)
        entries = [
            LeaderboardEntry(
                user_id=user.id,
                username=user.username,
                points=points.get(user.id, 0),
                badges=badges_for(points.get(user.id, 0)),
                contributions=contributions.get(user.id, 0),
                rank=position,
            )
            for position, user in enumerate(ranked, start=1)
        ]

        self._probe.leaderboard_computed(
            user_count=len(users),
            course_count=len(courses),
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return entries

    async def _courses_of(self, user_id: str) -> list[Course]:
        memberships: list[CourseMembership] = [
            m for m in await self._directory.list_memberships(user_id) if m.is_active
        ]
        courses = await self._directory.get_courses([m.course_id for m in memberships])
        return [
            courses[m.course_id]
            for m in memberships
            if m.course_id in courses and courses[m.course_id].is_active
        ]

    async def _fan_out(
        self,
        items: Iterable[T],
        operation: str,
        fetch: Callable[[T], Awaitable],
        default,
        key: Callable[[T], str] | None = None,
    ) -> list:
        """Run ``fetch`` for every item concurrently, preserving item order.

        ``key`` names the course an item belongs to (the item itself when it
        is a Course).
        """

        async def guarded(item: T):
            async with self._semaphore:
                try:
                    return await fetch(item)
                except Exception as e:
                    course_id = key(item) if key else getattr(item, "id", str(item))
                    self._probe.course_skipped(course_id, operation, str(e))
                    return default

        return list(await asyncio.gather(*(guarded(item) for item in items)))
