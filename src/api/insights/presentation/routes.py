"""HTTP routes for cross-course views.

These views tolerate unreachable course databases: affected courses are
left out and the request still succeeds.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from insights.application import CrossTenantAggregator
from insights.dependencies import get_aggregator
from insights.presentation.models import (
    AssignmentResponse,
    DashboardStatsResponse,
    LeaderboardEntryResponse,
)
from registry.application.value_objects import CurrentUser
from registry.dependencies.user import get_current_user

router = APIRouter(tags=["insights"])


@router.get("/dashboard/stats")
async def get_dashboard_stats(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    aggregator: Annotated[CrossTenantAggregator, Depends(get_aggregator)],
) -> DashboardStatsResponse:
    stats = await aggregator.dashboard_stats(current_user.id)
    return DashboardStatsResponse.from_domain(stats)


@router.get("/dashboard/assignments")
async def get_dashboard_assignments(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    aggregator: Annotated[CrossTenantAggregator, Depends(get_aggregator)],
) -> list[AssignmentResponse]:
    """All assignments across the caller's courses with completion and priority."""
    views = await aggregator.all_assignments(current_user.id)
    return [AssignmentResponse.from_domain(view) for view in views]


@router.get("/leaderboard")
async def get_global_leaderboard(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    aggregator: Annotated[CrossTenantAggregator, Depends(get_aggregator)],
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> list[LeaderboardEntryResponse]:
    """Platform-wide ranking by points (may be up to the cache TTL old)."""
    entries = await aggregator.global_leaderboard()
    if limit is not None:
        entries = entries[:limit]
    return [LeaderboardEntryResponse.from_domain(entry) for entry in entries]
