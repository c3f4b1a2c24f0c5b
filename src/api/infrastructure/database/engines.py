"""Database engine creation for async SQLAlchemy.

This module provides the factory for the registry database engine. Tenant
engines are built by the tenancy context from stored course credentials.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "create_registry_engine",
    "build_registry_url",
]


def create_registry_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the async engine for the registry database.

    Args:
        settings: Registry database settings

    Returns:
        Configured async engine
    """
    return create_async_engine(
        build_registry_url(settings),
        pool_size=settings.pool_max_connections,
        max_overflow=0,  # No overflow - strict pool limit
        pool_pre_ping=True,  # Verify connections before using
        echo=False,
    )


def build_registry_url(settings: DatabaseSettings) -> URL:
    """Parse the configured registry URL, forcing the asyncpg driver.

    ``DATABASE_URL`` values are commonly written as ``postgres://`` or
    ``postgresql://``; both are accepted and rewritten to the async driver.

    Args:
        settings: Registry database settings

    Returns:
        SQLAlchemy URL using the postgresql+asyncpg driver
    """
    url = make_url(settings.url.get_secret_value())
    if url.drivername in ("postgres", "postgresql", "postgresql+psycopg2"):
        url = url.set(drivername="postgresql+asyncpg")
    return url
