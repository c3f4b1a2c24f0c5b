"""Domain layer for the insights bounded context."""

from insights.domain.views import (
    AssignmentView,
    DashboardStats,
    LeaderboardEntry,
    Priority,
    badges_for,
    derive_priority,
)

__all__ = [
    "AssignmentView",
    "DashboardStats",
    "LeaderboardEntry",
    "Priority",
    "badges_for",
    "derive_priority",
]
