"""Platform settings service.

Settings are a flat key -> JSON value map. Well-known keys are validated
against their expected shape; any other key is stored as given.
"""

from __future__ import annotations

from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from registry.application.authorization import is_privileged
from registry.application.observability import (
    DefaultSettingsServiceProbe,
    SettingsServiceProbe,
)
from registry.application.value_objects import CurrentUser
from registry.domain import PlatformSetting
from registry.ports import (
    InvalidSettingValueError,
    ISettingsRepository,
    UnauthorizedError,
)

PUBLIC_SETTING_KEYS = frozenset({"platform_name", "anonymous_hub_enabled"})


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_optional_str(value: Any) -> bool:
    return value is None or isinstance(value, str)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


_VALIDATORS: dict[str, tuple[Callable[[Any], bool], str]] = {
    "platform_name": (_is_non_empty_str, "a non-empty string"),
    "anonymous_hub_enabled": (_is_bool, "a boolean"),
    "maintenance_message": (_is_optional_str, "a string or null"),
    "max_upload_mb": (_is_positive_int, "a positive integer"),
}


class SettingsService:
    """Reads and updates platform settings."""

    def __init__(
        self,
        session: AsyncSession,
        settings_repository: ISettingsRepository,
        probe: SettingsServiceProbe | None = None,
    ):
        self._session = session
        self._settings = settings_repository
        self._probe = probe or DefaultSettingsServiceProbe()

    async def get_all(self, actor: CurrentUser | None) -> dict[str, Any]:
        """Return the settings map; anonymous callers only see public keys."""
        async with self._session.begin():
            settings = await self._settings.list_all()
        values = {setting.key: setting.value for setting in settings}
        if actor is None:
            return {k: v for k, v in values.items() if k in PUBLIC_SETTING_KEYS}
        return values

    async def get(self, key: str) -> PlatformSetting | None:
        async with self._session.begin():
            return await self._settings.get(key)

    async def update(
        self, actor: CurrentUser, key: str, value: Any
    ) -> PlatformSetting:
        """Validate and store a setting.

        Raises:
            UnauthorizedError: If the actor is not privileged
            InvalidSettingValueError: If a well-known key gets the wrong shape
        """
        if not is_privileged(actor):
            raise UnauthorizedError("Admin access required")

        rule = _VALIDATORS.get(key)
        if rule is not None:
            check, expected = rule
            if not check(value):
                self._probe.setting_rejected(key, f"expected {expected}")
                raise InvalidSettingValueError(f"{key} must be {expected}")

        async with self._session.begin():
            setting = await self._settings.upsert(key, value, updated_by=actor.id)

        self._probe.setting_updated(key, actor.id)
        return setting
