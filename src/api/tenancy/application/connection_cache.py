"""Process-scoped cache of live course database handles."""

from __future__ import annotations

from tenancy.application.observability import (
    ConnectionCacheProbe,
    DefaultConnectionCacheProbe,
)
from tenancy.ports.protocols import TenantHandle


class TenantConnectionCache:
    """Maps course id -> the one canonical handle for that course.

    Created once per process (in the application lifespan) and passed by
    reference to the router. Entries live until ``invalidate`` or
    ``close_all``; there is no TTL and no eviction.

    ``put`` is first-writer-wins. A handle offered for a course that already
    has one is closed and the existing handle is returned, so concurrent
    first accesses can never leave two live handles for one course, and no
    caller is ever handed a handle that was closed underneath it.
    """

    def __init__(self, probe: ConnectionCacheProbe | None = None) -> None:
        self._handles: dict[str, TenantHandle] = {}
        self._probe = probe or DefaultConnectionCacheProbe()

    def get(self, course_id: str) -> TenantHandle | None:
        return self._handles.get(course_id)

    async def put(self, course_id: str, handle: TenantHandle) -> TenantHandle:
        """Store a handle unless one is already cached.

        Returns:
            The canonical handle for the course (possibly not ``handle``)
        """
        # No await between the lookup and the insert: atomic on the event loop.
        existing = self._handles.get(course_id)
        if existing is None:
            self._handles[course_id] = handle
            return handle

        if existing is not handle:
            self._probe.duplicate_handle_discarded(course_id)
            await self._close(course_id, handle)
        return existing

    async def invalidate(self, course_id: str) -> bool:
        """Drop and close the cached handle for a course.

        Returns:
            True if a handle was cached, False otherwise
        """
        handle = self._handles.pop(course_id, None)
        if handle is None:
            return False
        await self._close(course_id, handle)
        return True

    async def close_all(self) -> int:
        """Close every cached handle (application shutdown).

        Returns:
            Number of handles closed
        """
        handles = list(self._handles.items())
        self._handles.clear()
        for course_id, handle in handles:
            await self._close(course_id, handle)
        return len(handles)

    async def _close(self, course_id: str, handle: TenantHandle) -> None:
        try:
            await handle.close()
        except Exception as e:
            # The handle is already unreachable from the cache
            self._probe.handle_close_failed(course_id, str(e))

    def __contains__(self, course_id: object) -> bool:
        return course_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)
