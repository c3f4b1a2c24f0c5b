"""Domain probes for the course database router and its connection cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class TenantRouterProbe(Protocol):
    """Domain probe for resolving course ids to database handles."""

    def cache_hit(self, course_id: str) -> None:
        """Record that a cached handle was returned."""
        ...

    def credentials_missing(self, course_id: str) -> None:
        """Record that a course has no stored credentials (not provisioned)."""
        ...

    def credential_store_unavailable(self, course_id: str, error: str) -> None:
        """Record that credentials could not be read from the registry."""
        ...

    def connection_failed(self, course_id: str, error: str) -> None:
        """Record that the course database could not be reached."""
        ...

    def connection_established(self, course_id: str) -> None:
        """Record that a new handle became the cached handle for a course."""
        ...

    def handle_invalidated(self, course_id: str) -> None:
        """Record that a cached handle was dropped (credential rotation)."""
        ...

    def schema_provisioned(self, course_id: str, table_count: int) -> None:
        """Record that tenant tables were created on a course database."""
        ...

    def schema_provisioning_failed(self, course_id: str, error: str) -> None:
        """Record that tenant tables could not be created."""
        ...

    def with_context(self, context: ObservationContext) -> TenantRouterProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantRouterProbe:
    """Default implementation of TenantRouterProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantRouterProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantRouterProbe(logger=self._logger, context=context)

    def cache_hit(self, course_id: str) -> None:
        self._logger.debug(
            "tenant_handle_cache_hit",
            course_id=course_id,
            **self._get_context_kwargs(),
        )

    def credentials_missing(self, course_id: str) -> None:
        self._logger.warning(
            "tenant_credentials_missing",
            course_id=course_id,
            **self._get_context_kwargs(),
        )

    def credential_store_unavailable(self, course_id: str, error: str) -> None:
        self._logger.error(
            "tenant_credential_lookup_failed",
            course_id=course_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def connection_failed(self, course_id: str, error: str) -> None:
        self._logger.error(
            "tenant_connection_failed",
            course_id=course_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def connection_established(self, course_id: str) -> None:
        self._logger.info(
            "tenant_connection_established",
            course_id=course_id,
            **self._get_context_kwargs(),
        )

    def handle_invalidated(self, course_id: str) -> None:
        self._logger.info(
            "tenant_handle_invalidated",
            course_id=course_id,
            **self._get_context_kwargs(),
        )

    def schema_provisioned(self, course_id: str, table_count: int) -> None:
        self._logger.info(
            "tenant_schema_provisioned",
            course_id=course_id,
            table_count=table_count,
            **self._get_context_kwargs(),
        )

    def schema_provisioning_failed(self, course_id: str, error: str) -> None:
        self._logger.error(
            "tenant_schema_provisioning_failed",
            course_id=course_id,
            error=error,
            **self._get_context_kwargs(),
        )


class ConnectionCacheProbe(Protocol):
    """Domain probe for the process-wide tenant connection cache."""

    def duplicate_handle_discarded(self, course_id: str) -> None:
        """Record that a handle lost a first-access race and was closed."""
        ...

    def handle_close_failed(self, course_id: str, error: str) -> None:
        """Record that closing a handle raised."""
        ...


class DefaultConnectionCacheProbe:
    """Default implementation of ConnectionCacheProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def duplicate_handle_discarded(self, course_id: str) -> None:
        self._logger.info("tenant_duplicate_handle_discarded", course_id=course_id)

    def handle_close_failed(self, course_id: str, error: str) -> None:
        self._logger.warning(
            "tenant_handle_close_failed",
            course_id=course_id,
            error=error,
        )
