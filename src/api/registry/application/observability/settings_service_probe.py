"""Domain probe for platform settings operations."""

from __future__ import annotations

from typing import Protocol

import structlog


class SettingsServiceProbe(Protocol):
    """Domain probe for platform settings changes."""

    def setting_updated(self, key: str, actor_id: str) -> None:
        """Record that a setting was changed (values are not logged)."""
        ...

    def setting_rejected(self, key: str, reason: str) -> None:
        """Record that a setting value failed validation."""
        ...


class DefaultSettingsServiceProbe:
    """Default implementation of SettingsServiceProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def setting_updated(self, key: str, actor_id: str) -> None:
        self._logger.info("platform_setting_updated", key=key, actor_id=actor_id)

    def setting_rejected(self, key: str, reason: str) -> None:
        self._logger.info("platform_setting_rejected", key=key, reason=reason)
