"""Unit tests for tenant schema provisioning."""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest
from sqlalchemy import Column, Integer, MetaData, Table
from sqlalchemy.exc import OperationalError

from tenancy.application import CourseDatabaseRouter, TenantSchemaProvisioner
from tenancy.application.observability import TenantRouterProbe
from tenancy.domain import TenantUnavailable, UnavailableReason


@pytest.fixture
def metadata() -> MetaData:
    metadata = MetaData()
    Table("posts", metadata, Column("id", Integer, primary_key=True))
    Table("comments", metadata, Column("id", Integer, primary_key=True))
    return metadata


@pytest.fixture
def probe():
    return create_autospec(TenantRouterProbe, instance=True)


def _handle_with_session(session: AsyncMock) -> MagicMock:
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=session)
    ctx.__aexit__ = AsyncMock(return_value=None)
    handle = MagicMock()
    handle.session = MagicMock(return_value=ctx)
    return handle


class TestProvision:
    @pytest.mark.asyncio
    async def test_creates_tables_and_commits(self, metadata, probe):
        session = AsyncMock()
        router = create_autospec(CourseDatabaseRouter, instance=True)
        router.resolve.return_value = _handle_with_session(session)
        provisioner = TenantSchemaProvisioner(router, metadata, probe=probe)

        assert await provisioner.provision("course-1") is True

        session.run_sync.assert_awaited_once()
        session.commit.assert_awaited_once()
        probe.schema_provisioned.assert_called_once_with("course-1", 2)

    @pytest.mark.asyncio
    async def test_unavailable_course_is_not_provisioned(self, metadata, probe):
        router = create_autospec(CourseDatabaseRouter, instance=True)
        router.resolve.return_value = TenantUnavailable(
            "course-1", UnavailableReason.UNREACHABLE
        )
        provisioner = TenantSchemaProvisioner(router, metadata, probe=probe)

        assert await provisioner.provision("course-1") is False
        probe.schema_provisioned.assert_not_called()

    @pytest.mark.asyncio
    async def test_ddl_failure_is_reported(self, metadata, probe):
        session = AsyncMock()
        session.run_sync.side_effect = OperationalError("CREATE", {}, Exception())
        router = create_autospec(CourseDatabaseRouter, instance=True)
        router.resolve.return_value = _handle_with_session(session)
        provisioner = TenantSchemaProvisioner(router, metadata, probe=probe)

        assert await provisioner.provision("course-1") is False
        probe.schema_provisioning_failed.assert_called_once()
