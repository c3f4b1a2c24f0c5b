"""Domain probe for user service operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user provisioning and administration."""

    def user_ensured(self, user_id: str, username: str, was_created: bool) -> None:
        """Record that a verified user was found or provisioned."""
        ...

    def user_provision_failed(self, user_id: str, error: str) -> None:
        """Record that provisioning a verified user failed."""
        ...

    def banned_user_rejected(self, user_id: str) -> None:
        """Record that a banned user was turned away."""
        ...

    def ban_changed(self, user_id: str, banned: bool, actor_id: str) -> None:
        """Record that a user was banned or unbanned."""
        ...

    def role_assigned(
        self, user_id: str, kind: str, scope: str | None, actor_id: str
    ) -> None:
        """Record that a role was granted."""
        ...

    def role_revoked(self, role_id: str, user_id: str, actor_id: str) -> None:
        """Record that a role grant was removed."""
        ...

    def creator_protection_triggered(self, user_id: str, operation: str) -> None:
        """Record that an operation against the creator was refused."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_ensured(self, user_id: str, username: str, was_created: bool) -> None:
        self._logger.info(
            "user_ensured",
            user_id=user_id,
            username=username,
            was_created=was_created,
            **self._get_context_kwargs(),
        )

    def user_provision_failed(self, user_id: str, error: str) -> None:
        self._logger.error(
            "user_provision_failed",
            user_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def banned_user_rejected(self, user_id: str) -> None:
        self._logger.warning(
            "banned_user_rejected",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def ban_changed(self, user_id: str, banned: bool, actor_id: str) -> None:
        self._logger.info(
            "user_ban_changed",
            user_id=user_id,
            banned=banned,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def role_assigned(
        self, user_id: str, kind: str, scope: str | None, actor_id: str
    ) -> None:
        self._logger.info(
            "role_assigned",
            user_id=user_id,
            kind=kind,
            scope=scope,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def role_revoked(self, role_id: str, user_id: str, actor_id: str) -> None:
        self._logger.info(
            "role_revoked",
            role_id=role_id,
            user_id=user_id,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def creator_protection_triggered(self, user_id: str, operation: str) -> None:
        self._logger.warning(
            "creator_protection_triggered",
            user_id=user_id,
            operation=operation,
            **self._get_context_kwargs(),
        )
