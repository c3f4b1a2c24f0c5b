"""Domain probes for tenancy infrastructure (credential store, connector)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class CredentialStoreProbe(Protocol):
    """Domain probe for credential store operations.

    Events carry course ids and endpoints only. Keys are never recorded.
    """

    def credentials_saved(self, course_id: str, endpoint: str, created: bool) -> None:
        """Record that credentials were inserted or replaced."""
        ...

    def store_unavailable(self, course_id: str, operation: str, error: str) -> None:
        """Record that the registry could not serve a credential operation."""
        ...

    def with_context(self, context: ObservationContext) -> CredentialStoreProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCredentialStoreProbe:
    """Default implementation of CredentialStoreProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultCredentialStoreProbe:
        """Create a new probe with observation context bound."""
        return DefaultCredentialStoreProbe(logger=self._logger, context=context)

    def credentials_saved(self, course_id: str, endpoint: str, created: bool) -> None:
        self._logger.info(
            "course_credentials_saved",
            course_id=course_id,
            endpoint=endpoint,
            created=created,
            **self._get_context_kwargs(),
        )

    def store_unavailable(self, course_id: str, operation: str, error: str) -> None:
        self._logger.error(
            "credential_store_unavailable",
            course_id=course_id,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )


class TenantConnectorProbe(Protocol):
    """Domain probe for establishing course database connections."""

    def connection_verified(self, course_id: str, host: str) -> None:
        """Record that a new course database connection answered a ping."""
        ...

    def connection_attempt_failed(self, course_id: str, host: str | None, error: str) -> None:
        """Record that a course database could not be reached."""
        ...


class DefaultTenantConnectorProbe:
    """Default implementation of TenantConnectorProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def connection_verified(self, course_id: str, host: str) -> None:
        self._logger.info(
            "tenant_connection_verified",
            course_id=course_id,
            host=host,
        )

    def connection_attempt_failed(self, course_id: str, host: str | None, error: str) -> None:
        self._logger.warning(
            "tenant_connection_attempt_failed",
            course_id=course_id,
            host=host,
            error=error,
        )
