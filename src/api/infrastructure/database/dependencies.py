"""Registry database dependency injection for FastAPI.

Provides the registry engine, its sessionmaker, and a per-request session
dependency. Tenant databases are not handled here; see the tenancy context.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_registry_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

_probe = DefaultConnectionProbe()

# Module-level engine instance (created on first use)
_registry_engine: AsyncEngine | None = None
_registry_sessionmaker: async_sessionmaker[AsyncSession] | None = None

_engine_lock = threading.Lock()


def get_registry_engine() -> AsyncEngine:
    """Get the registry database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.

    Returns:
        Configured async engine for the registry database

    Raises:
        pydantic.ValidationError: If DATABASE_URL is not configured
    """
    global _registry_engine, _registry_sessionmaker
    if _registry_engine is None:
        with _engine_lock:
            if _registry_engine is None:
                settings = get_database_settings()
                _registry_engine = create_registry_engine(settings)
                _registry_sessionmaker = async_sessionmaker(
                    _registry_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.pool_initialized(
                    min_conn=settings.pool_min_connections,
                    max_conn=settings.pool_max_connections,
                )
    return _registry_engine


def get_registry_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the registry sessionmaker, initializing the engine if needed."""
    get_registry_engine()
    assert _registry_sessionmaker is not None
    return _registry_sessionmaker


async def get_registry_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a registry session (FastAPI dependency).

    The session does NOT auto-commit. Services manage transactions
    explicitly with ``async with session.begin()``.

    Yields:
        AsyncSession bound to the registry database
    """
    async with get_registry_sessionmaker()() as session:
        yield session


async def close_registry_connections() -> None:
    """Dispose the registry engine.

    Called on application shutdown. Resets the sessionmaker so the engine
    can be re-created (tests, reloads).
    """
    global _registry_engine, _registry_sessionmaker

    if _registry_engine is not None:
        await _registry_engine.dispose()
        _probe.pool_closed()
        _registry_engine = None
        _registry_sessionmaker = None
