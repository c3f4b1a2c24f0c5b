"""Domain probe for cross-course aggregation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class AggregatorProbe(Protocol):
    """Domain probe for dashboard and leaderboard aggregation."""

    def course_skipped(self, course_id: str, operation: str, error: str) -> None:
        """Record that one course's contribution was dropped after an error."""
        ...

    def dashboard_computed(self, user_id: str, course_count: int) -> None:
        ...

    def leaderboard_computed(
        self, user_count: int, course_count: int, duration_ms: float
    ) -> None:
        ...

    def leaderboard_cache_hit(self) -> None:
        ...

    def with_context(self, context: ObservationContext) -> AggregatorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAggregatorProbe:
    """Default implementation of AggregatorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAggregatorProbe:
        """Create a new probe with observation context bound."""
        return DefaultAggregatorProbe(logger=self._logger, context=context)

    def course_skipped(self, course_id: str, operation: str, error: str) -> None:
        self._logger.warning(
            "aggregation_course_skipped",
            course_id=course_id,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

    def dashboard_computed(self, user_id: str, course_count: int) -> None:
        self._logger.debug(
            "dashboard_computed",
            user_id=user_id,
            course_count=course_count,
            **self._get_context_kwargs(),
        )

    def leaderboard_computed(
        self, user_count: int, course_count: int, duration_ms: float
    ) -> None:
        self._logger.info(
            "global_leaderboard_computed",
            user_count=user_count,
            course_count=course_count,
            duration_ms=duration_ms,
            **self._get_context_kwargs(),
        )

    def leaderboard_cache_hit(self) -> None:
        self._logger.debug("global_leaderboard_cache_hit", **self._get_context_kwargs())
