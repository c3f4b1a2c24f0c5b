"""SQLAlchemy-backed tenant handle."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


class EngineTenantHandle:
    """A course database reached through its own ``AsyncEngine``.

    The engine owns a small connection pool; sessions opened through the
    handle borrow from it, so one handle serves any number of concurrent
    requests for the course.
    """

    def __init__(self, course_id: str, engine: AsyncEngine) -> None:
        self._course_id = course_id
        self._engine = engine
        self._sessionmaker = async_sessionmaker(
            engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )
        self._closed = False

    @property
    def course_id(self) -> str:
        return self._course_id

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def closed(self) -> bool:
        return self._closed

    def session(self) -> AsyncSession:
        """Open a new session on the course database."""
        return self._sessionmaker()

    async def close(self) -> None:
        """Dispose the engine's pool. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._engine.dispose()

    def __repr__(self) -> str:
        return f"<EngineTenantHandle(course_id={self._course_id}, closed={self._closed})>"
