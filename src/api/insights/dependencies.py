"""Dependency injection for the insights bounded context."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from insights.application import CrossTenantAggregator


def get_aggregator(request: Request) -> CrossTenantAggregator:
    """Return the process-scoped aggregator (FastAPI dependency).

    Raises:
        HTTPException: 503 if the application lifespan has not built it
    """
    aggregator = getattr(request.app.state, "aggregator", None)
    if aggregator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Aggregation is not initialized",
        )
    return aggregator
