"""Domain probe for application startup and lifecycle events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_started(self, app_name: str, version: str) -> None:
        """Record that the application finished starting."""
        ...

    def tenant_connections_closed(self, count: int) -> None:
        """Record that cached tenant connections were closed at shutdown."""
        ...

    def identity_provider_unconfigured(self) -> None:
        """Record that no identity provider URL is configured."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def application_started(self, app_name: str, version: str) -> None:
        """Record that the application finished starting."""
        self._logger.info(
            "application_started",
            app_name=app_name,
            version=version,
            **self._get_context_kwargs(),
        )

    def tenant_connections_closed(self, count: int) -> None:
        """Record that cached tenant connections were closed at shutdown."""
        self._logger.info(
            "tenant_connections_closed",
            count=count,
            **self._get_context_kwargs(),
        )

    def identity_provider_unconfigured(self) -> None:
        """Record that no identity provider URL is configured."""
        self._logger.warning(
            "identity_provider_unconfigured",
            **self._get_context_kwargs(),
        )
