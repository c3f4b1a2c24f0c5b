"""Pydantic models for dashboard and leaderboard responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from insights.domain import AssignmentView, DashboardStats, LeaderboardEntry, Priority


class DashboardStatsResponse(BaseModel):
    total_courses: int
    total_assignments: int
    completed_assignments: int
    pending_assignments: int
    rank: int
    points: int

    @classmethod
    def from_domain(cls, stats: DashboardStats) -> DashboardStatsResponse:
        return cls(
            total_courses=stats.total_courses,
            total_assignments=stats.total_assignments,
            completed_assignments=stats.completed_assignments,
            pending_assignments=stats.pending_assignments,
            rank=stats.rank,
            points=stats.points,
        )


class AssignmentResponse(BaseModel):
    id: str
    title: str
    course: str
    course_id: str
    due_date: datetime | None
    description: str
    is_completed: bool
    priority: Priority
    submission_type: str

    @classmethod
    def from_domain(cls, view: AssignmentView) -> AssignmentResponse:
        return cls(
            id=view.id,
            title=view.title,
            course=view.course,
            course_id=view.course_id,
            due_date=view.due_date,
            description=view.description,
            is_completed=view.is_completed,
            priority=view.priority,
            submission_type=view.submission_type,
        )


class LeaderboardEntryResponse(BaseModel):
    rank: int
    user_id: str
    username: str
    points: int
    badges: int
    contributions: int

    @classmethod
    def from_domain(cls, entry: LeaderboardEntry) -> LeaderboardEntryResponse:
        return cls(
            rank=entry.rank,
            user_id=entry.user_id,
            username=entry.username,
            points=entry.points,
            badges=entry.badges,
            contributions=entry.contributions,
        )
