"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for registry database connection observability."""

    def pool_initialized(self, min_conn: int, max_conn: int) -> None:
        """Record that the registry connection pool was initialized."""
        ...

    def pool_closed(self) -> None:
        """Record that the registry connection pool was closed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog.

    Supports observation context for including request-scoped metadata
    with all log events.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def pool_initialized(self, min_conn: int, max_conn: int) -> None:
        """Record that the registry connection pool was initialized."""
        self._logger.info(
            "registry_pool_initialized",
            min_connections=min_conn,
            max_connections=max_conn,
            **self._get_context_kwargs(),
        )

    def pool_closed(self) -> None:
        """Record that the registry connection pool was closed."""
        self._logger.info(
            "registry_pool_closed",
            **self._get_context_kwargs(),
        )
