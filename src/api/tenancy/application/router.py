"""Course database router.

The single entry point the rest of the system uses to obtain a working
handle for a course database.
"""

from __future__ import annotations

import asyncio

from tenancy.application.connection_cache import TenantConnectionCache
from tenancy.application.observability import (
    DefaultTenantRouterProbe,
    TenantRouterProbe,
)
from tenancy.domain.results import TenantUnavailable, UnavailableReason
from tenancy.ports.exceptions import (
    CredentialStoreUnavailableError,
    TenantConnectionError,
)
from tenancy.ports.protocols import ICredentialStore, ITenantConnector, TenantHandle


class CourseDatabaseRouter:
    """Resolves a course id to a live handle on that course's database.

    Resolution order: connection cache, then credential store, then a new
    connection which is cached before being returned.

    ``resolve`` never raises for a course that is not provisioned, whose
    database is unreachable, or whose credentials cannot be read. All three
    come back as a ``TenantUnavailable`` so callers can degrade (an empty
    list) instead of failing the request.

    Concurrent first accesses for one course are single-flighted through a
    per-course lock: only one connection attempt is made and every waiter
    receives the handle it produced.
    """

    def __init__(
        self,
        credential_store: ICredentialStore,
        connector: ITenantConnector,
        cache: TenantConnectionCache,
        probe: TenantRouterProbe | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            credential_store: Source of course connection parameters
            connector: Opens connections to course databases
            cache: Process-scoped handle cache shared with other routers
            probe: Optional domain probe for observability
        """
        self._credential_store = credential_store
        self._connector = connector
        self._cache = cache
        self._probe = probe or DefaultTenantRouterProbe()
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def cache(self) -> TenantConnectionCache:
        return self._cache

    async def resolve(self, course_id: str) -> TenantHandle | TenantUnavailable:
        """Return the handle for a course, establishing it on first use.

        Args:
            course_id: The course whose database is wanted

        Returns:
            The canonical handle, or TenantUnavailable describing why none
            could be produced. No retry is attempted within the call.
        """
        handle = self._cache.get(course_id)
        if handle is not None:
            self._probe.cache_hit(course_id)
            return handle

        lock = self._locks.setdefault(course_id, asyncio.Lock())
        try:
            async with lock:
                # Another waiter may have connected while we queued
                handle = self._cache.get(course_id)
                if handle is not None:
                    self._probe.cache_hit(course_id)
                    return handle
                return await self._establish(course_id)
        finally:
            # Waiters already queued keep their reference; later callers
            # either hit the cache or start a fresh attempt.
            if self._locks.get(course_id) is lock:
                del self._locks[course_id]

    async def invalidate(self, course_id: str) -> bool:
        """Forget the cached handle for a course (e.g. after credential rotation).

        The next ``resolve`` reconnects with whatever credentials are stored.
        """
        invalidated = await self._cache.invalidate(course_id)
        if invalidated:
            self._probe.handle_invalidated(course_id)
        return invalidated

    async def _establish(self, course_id: str) -> TenantHandle | TenantUnavailable:
        try:
            credentials = await self._credential_store.get(course_id)
        except CredentialStoreUnavailableError as e:
            self._probe.credential_store_unavailable(course_id, str(e))
            return TenantUnavailable(course_id, UnavailableReason.STORE_UNAVAILABLE)

        if credentials is None:
            self._probe.credentials_missing(course_id)
            return TenantUnavailable(course_id, UnavailableReason.NOT_CONFIGURED)

        try:
            handle = await self._connector.connect(course_id, credentials)
        except TenantConnectionError as e:
            self._probe.connection_failed(course_id, str(e))
            return TenantUnavailable(course_id, UnavailableReason.UNREACHABLE)

        canonical = await self._cache.put(course_id, handle)
        self._probe.connection_established(course_id)
        return canonical
