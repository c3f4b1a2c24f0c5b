"""Unit tests for SettingsService."""

from datetime import UTC, datetime
from unittest.mock import create_autospec

import pytest

from registry.application.observability import SettingsServiceProbe
from registry.application.services import SettingsService
from registry.domain import PlatformSetting, RoleKind
from registry.ports import (
    InvalidSettingValueError,
    ISettingsRepository,
    UnauthorizedError,
)

NOW = datetime(2026, 3, 1, tzinfo=UTC)


def _setting(key: str, value) -> PlatformSetting:
    return PlatformSetting(key=key, value=value, updated_by="root", updated_at=NOW)


@pytest.fixture
def mock_settings_repository():
    repo = create_autospec(ISettingsRepository, instance=True)
    repo.list_all.return_value = [
        _setting("platform_name", "CourseHub"),
        _setting("anonymous_hub_enabled", True),
        _setting("maintenance_message", "Back soon"),
    ]
    return repo


@pytest.fixture
def mock_probe():
    return create_autospec(SettingsServiceProbe, instance=True)


@pytest.fixture
def settings_service(mock_session, mock_settings_repository, mock_probe):
    return SettingsService(
        session=mock_session,
        settings_repository=mock_settings_repository,
        probe=mock_probe,
    )


@pytest.fixture
def top_admin(current_user_factory):
    return current_user_factory("admin", roles=((RoleKind.TOP_ADMIN, None),))


class TestGetAll:
    @pytest.mark.asyncio
    async def test_anonymous_sees_public_keys_only(self, settings_service):
        values = await settings_service.get_all(None)

        assert values == {"platform_name": "CourseHub", "anonymous_hub_enabled": True}

    @pytest.mark.asyncio
    async def test_signed_in_user_sees_everything(
        self, settings_service, current_user_factory
    ):
        values = await settings_service.get_all(current_user_factory())

        assert values["maintenance_message"] == "Back soon"


class TestUpdate:
    @pytest.mark.asyncio
    async def test_regular_user_cannot_update(
        self, settings_service, current_user_factory
    ):
        with pytest.raises(UnauthorizedError):
            await settings_service.update(current_user_factory(), "platform_name", "X")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("platform_name", ""),
            ("platform_name", 42),
            ("anonymous_hub_enabled", "yes"),
            ("max_upload_mb", 0),
            ("max_upload_mb", True),
            ("maintenance_message", 3),
        ],
    )
    async def test_well_known_keys_are_validated(
        self,
        settings_service,
        mock_settings_repository,
        mock_probe,
        top_admin,
        key,
        value,
    ):
        with pytest.raises(InvalidSettingValueError):
            await settings_service.update(top_admin, key, value)

        mock_settings_repository.upsert.assert_not_awaited()
        mock_probe.setting_rejected.assert_called_once()

    @pytest.mark.asyncio
    async def test_unknown_keys_are_stored_as_given(
        self, settings_service, mock_settings_repository, top_admin
    ):
        mock_settings_repository.upsert.return_value = _setting("theme", {"dark": True})

        setting = await settings_service.update(top_admin, "theme", {"dark": True})

        assert setting.value == {"dark": True}
        mock_settings_repository.upsert.assert_awaited_once_with(
            "theme", {"dark": True}, updated_by="admin"
        )

    @pytest.mark.asyncio
    async def test_maintenance_message_can_be_cleared(
        self, settings_service, mock_settings_repository, top_admin
    ):
        mock_settings_repository.upsert.return_value = _setting(
            "maintenance_message", None
        )

        await settings_service.update(top_admin, "maintenance_message", None)

        mock_settings_repository.upsert.assert_awaited_once()
