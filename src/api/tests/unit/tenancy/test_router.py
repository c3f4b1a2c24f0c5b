"""Unit tests for the course database router."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from tenancy.application import CourseDatabaseRouter, TenantConnectionCache
from tenancy.application.observability import TenantRouterProbe
from tenancy.domain import TenantUnavailable, UnavailableReason
from tenancy.ports import (
    CredentialStoreUnavailableError,
    ICredentialStore,
    ITenantConnector,
    TenantConnectionError,
)


def _handle(course_id: str = "course-1") -> MagicMock:
    handle = MagicMock()
    handle.course_id = course_id
    handle.close = AsyncMock()
    return handle


@pytest.fixture
def credential_store(credentials):
    store = create_autospec(ICredentialStore, instance=True)
    store.get.return_value = credentials
    return store


@pytest.fixture
def connector():
    connector = create_autospec(ITenantConnector, instance=True)
    connector.connect.side_effect = lambda course_id, credentials: _handle(course_id)
    return connector


@pytest.fixture
def probe():
    return create_autospec(TenantRouterProbe, instance=True)


@pytest.fixture
def cache() -> TenantConnectionCache:
    return TenantConnectionCache()


@pytest.fixture
def router(credential_store, connector, cache, probe) -> CourseDatabaseRouter:
    return CourseDatabaseRouter(
        credential_store=credential_store,
        connector=connector,
        cache=cache,
        probe=probe,
    )


class TestResolve:
    @pytest.mark.asyncio
    async def test_connects_and_caches_on_first_use(
        self, router, connector, cache, credentials
    ):
        handle = await router.resolve("course-1")

        assert handle
        assert cache.get("course-1") is handle
        connector.connect.assert_awaited_once_with("course-1", credentials)

    @pytest.mark.asyncio
    async def test_repeated_resolution_returns_same_handle(
        self, router, connector, credential_store, probe
    ):
        first = await router.resolve("course-1")
        second = await router.resolve("course-1")

        assert first is second
        assert connector.connect.await_count == 1
        assert credential_store.get.await_count == 1
        probe.cache_hit.assert_called_with("course-1")

    @pytest.mark.asyncio
    async def test_missing_credentials_is_not_configured(
        self, router, credential_store, connector, cache
    ):
        credential_store.get.return_value = None

        result = await router.resolve("course-1")

        assert isinstance(result, TenantUnavailable)
        assert result.reason == UnavailableReason.NOT_CONFIGURED
        assert not result
        connector.connect.assert_not_awaited()
        assert "course-1" not in cache

    @pytest.mark.asyncio
    async def test_store_failure_is_store_unavailable(self, router, credential_store):
        credential_store.get.side_effect = CredentialStoreUnavailableError("down")

        result = await router.resolve("course-1")

        assert isinstance(result, TenantUnavailable)
        assert result.reason == UnavailableReason.STORE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_connection_failure_is_unreachable_and_not_cached(
        self, router, connector, cache
    ):
        connector.connect.side_effect = TenantConnectionError("refused")

        result = await router.resolve("course-1")

        assert isinstance(result, TenantUnavailable)
        assert result.reason == UnavailableReason.UNREACHABLE
        assert "course-1" not in cache

    @pytest.mark.asyncio
    async def test_failure_is_retried_on_next_call(self, router, connector):
        connector.connect.side_effect = [TenantConnectionError("refused"), _handle()]

        assert not await router.resolve("course-1")
        assert await router.resolve("course-1")
        assert connector.connect.await_count == 2

    @pytest.mark.asyncio
    async def test_locks_do_not_accumulate_for_failed_courses(
        self, router, credential_store
    ):
        credential_store.get.return_value = None

        for i in range(20):
            assert not await router.resolve(f"course-{i}")

        assert router._locks == {}

    @pytest.mark.asyncio
    async def test_lock_released_after_successful_connect(self, router):
        assert await router.resolve("course-1")
        assert router._locks == {}

    @pytest.mark.asyncio
    async def test_concurrent_first_access_yields_one_handle(
        self, router, connector, cache
    ):
        async def slow_connect(course_id, credentials):
            await asyncio.sleep(0.01)
            return _handle(course_id)

        connector.connect.side_effect = slow_connect

        results = await asyncio.gather(*(router.resolve("course-1") for _ in range(10)))

        assert all(result is results[0] for result in results)
        assert connector.connect.await_count == 1
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_different_courses_get_different_handles(self, router):
        first = await router.resolve("course-1")
        second = await router.resolve("course-2")

        assert first is not second
        assert first.course_id == "course-1"
        assert second.course_id == "course-2"

    @pytest.mark.asyncio
    async def test_handle_from_another_router_sharing_cache_is_kept(
        self, router, connector, cache, credential_store
    ):
        """A racing writer that fills the cache first wins; ours is closed."""
        winner = _handle()
        loser = _handle()

        async def connect_and_lose_race(course_id, credentials):
            await cache.put(course_id, winner)
            return loser

        connector.connect.side_effect = connect_and_lose_race

        result = await router.resolve("course-1")

        assert result is winner
        loser.close.assert_awaited_once()


class TestInvalidate:
    @pytest.mark.asyncio
    async def test_next_resolve_reconnects(self, router, connector, probe):
        first = await router.resolve("course-1")

        assert await router.invalidate("course-1") is True
        second = await router.resolve("course-1")

        assert first is not second
        first.close.assert_awaited_once()
        assert connector.connect.await_count == 2
        probe.handle_invalidated.assert_called_once_with("course-1")

    @pytest.mark.asyncio
    async def test_invalidate_unknown_course(self, router, probe):
        assert await router.invalidate("course-9") is False
        probe.handle_invalidated.assert_not_called()
