"""Read models that span the registry and several course databases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

HIGH_PRIORITY_WINDOW = timedelta(days=3)
MEDIUM_PRIORITY_WINDOW = timedelta(days=7)
POINTS_PER_BADGE = 100


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def derive_priority(deadline: datetime | None, now: datetime) -> Priority:
    """Urgency of an assignment from the time left until its deadline.

    Within three days (or overdue) is high, within seven days medium,
    anything later low. Assignments without a deadline are medium.
    """
    if deadline is None:
        return Priority.MEDIUM
    remaining = deadline - now
    if remaining <= HIGH_PRIORITY_WINDOW:
        return Priority.HIGH
    if remaining <= MEDIUM_PRIORITY_WINDOW:
        return Priority.MEDIUM
    return Priority.LOW


def badges_for(points: int) -> int:
    """Badges are derived from points, not read from awarded badges."""
    return max(points, 0) // POINTS_PER_BADGE


@dataclass(frozen=True)
class DashboardStats:
    """One user's totals across every course they are an active member of."""

    total_courses: int = 0
    total_assignments: int = 0
    completed_assignments: int = 0
    pending_assignments: int = 0
    rank: int = 0
    points: int = 0


@dataclass(frozen=True)
class AssignmentView:
    """An assignment post joined with the user's completion and its course."""

    id: str
    title: str
    course: str
    course_id: str
    due_date: datetime | None
    description: str
    is_completed: bool
    priority: Priority
    submission_type: str = "Assignment"


@dataclass(frozen=True)
class LeaderboardEntry:
    """A user's position on the platform-wide leaderboard."""

    user_id: str
    username: str
    points: int
    badges: int
    contributions: int
    rank: int
