"""Unit tests for the registry-backed credential store."""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest
from sqlalchemy.exc import OperationalError

from tenancy.domain.credentials import PublicCourseCredentials
from tenancy.infrastructure.credential_store import CredentialStore
from tenancy.infrastructure.models import CourseCredentialsModel
from tenancy.infrastructure.observability import CredentialStoreProbe
from tenancy.ports import CredentialStoreUnavailableError


def _sessionmaker(session: AsyncMock) -> MagicMock:
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=session)
    ctx.__aexit__ = AsyncMock(return_value=None)
    return MagicMock(return_value=ctx)


def _result(model):
    result = MagicMock()
    result.scalar_one_or_none.return_value = model
    return result


@pytest.fixture
def probe():
    return create_autospec(CredentialStoreProbe, instance=True)


class TestGet:
    @pytest.mark.asyncio
    async def test_returns_none_when_course_has_no_row(self, mock_session, probe):
        mock_session.execute.return_value = _result(None)
        store = CredentialStore(_sessionmaker(mock_session), probe=probe)

        assert await store.get("course-1") is None

    @pytest.mark.asyncio
    async def test_maps_row_to_credentials(self, mock_session, probe):
        mock_session.execute.return_value = _result(
            CourseCredentialsModel(
                id="01ABC",
                course_id="course-1",
                endpoint="https://abcd.supabase.co",
                public_key="anon",
                service_key="secret",
            )
        )
        store = CredentialStore(_sessionmaker(mock_session), probe=probe)

        credentials = await store.get("course-1")

        assert credentials is not None
        assert credentials.endpoint == "https://abcd.supabase.co"
        assert credentials.service_key.get_secret_value() == "secret"
        assert "secret" not in repr(credentials)

    @pytest.mark.asyncio
    async def test_registry_failure_raises_unavailable(self, mock_session, probe):
        mock_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
        store = CredentialStore(_sessionmaker(mock_session), probe=probe)

        with pytest.raises(CredentialStoreUnavailableError):
            await store.get("course-1")

        probe.store_unavailable.assert_called_once()


class TestPut:
    @pytest.mark.asyncio
    async def test_joins_callers_session(self, mock_session, probe, credentials):
        mock_session.execute.return_value = _result(None)
        mock_session.add = MagicMock()
        sessionmaker = MagicMock()
        store = CredentialStore(sessionmaker, probe=probe)

        await store.put("course-1", credentials, session=mock_session)

        added = mock_session.add.call_args.args[0]
        assert added.course_id == "course-1"
        assert added.service_key == "service-secret"
        mock_session.flush.assert_awaited_once()
        sessionmaker.assert_not_called()
        probe.credentials_saved.assert_called_once_with(
            "course-1", credentials.endpoint, True
        )

    @pytest.mark.asyncio
    async def test_replaces_existing_row(self, mock_session, probe, credentials):
        existing = CourseCredentialsModel(
            id="01ABC",
            course_id="course-1",
            endpoint="https://old.supabase.co",
            public_key="old",
            service_key="old-secret",
        )
        mock_session.execute.return_value = _result(existing)
        mock_session.add = MagicMock()
        store = CredentialStore(_sessionmaker(mock_session), probe=probe)

        await store.put("course-1", credentials)

        assert existing.endpoint == credentials.endpoint
        assert existing.service_key == "service-secret"
        mock_session.add.assert_not_called()
        probe.credentials_saved.assert_called_once_with(
            "course-1", credentials.endpoint, False
        )


class TestCourseCredentials:
    def test_public_view_carries_only_browser_safe_fields(self, credentials):
        public = credentials.public_view()

        assert public == PublicCourseCredentials(
            endpoint="https://abcd.supabase.co", public_key="anon-key"
        )
        assert not hasattr(public, "service_key")
        assert "service-secret" not in repr(credentials)
        assert "service-secret" not in str(credentials)
