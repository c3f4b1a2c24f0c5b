"""Domain probe for bearer token verification.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to identity verification. Tokens are
never logged.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class IdentityProbe(Protocol):
    """Domain probe for identity verification."""

    def token_verified(self, user_id: str) -> None:
        """Record that a token was accepted by the provider."""
        ...

    def token_rejected(self, status_code: int) -> None:
        """Record that the provider did not accept a token."""
        ...

    def provider_request_failed(self, error: str) -> None:
        """Record that the provider could not be reached."""
        ...

    def provider_unconfigured(self) -> None:
        """Record that verification was attempted without a configured provider."""
        ...

    def with_context(self, context: ObservationContext) -> IdentityProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIdentityProbe:
    """Default implementation of IdentityProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultIdentityProbe:
        """Create a new probe with observation context bound."""
        return DefaultIdentityProbe(logger=self._logger, context=context)

    def token_verified(self, user_id: str) -> None:
        self._logger.debug(
            "identity_token_verified",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def token_rejected(self, status_code: int) -> None:
        self._logger.info(
            "identity_token_rejected",
            status_code=status_code,
            **self._get_context_kwargs(),
        )

    def provider_request_failed(self, error: str) -> None:
        self._logger.error(
            "identity_provider_request_failed",
            error=error,
            **self._get_context_kwargs(),
        )

    def provider_unconfigured(self) -> None:
        self._logger.warning(
            "identity_provider_unconfigured",
            **self._get_context_kwargs(),
        )
