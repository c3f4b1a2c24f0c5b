"""Connection establishment for course databases.

Builds a database URL from stored course credentials and verifies the
connection with a bounded ping before handing it out.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import urlsplit

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from tenancy.infrastructure.handle import EngineTenantHandle
from tenancy.infrastructure.observability import (
    DefaultTenantConnectorProbe,
    TenantConnectorProbe,
)
from tenancy.ports.exceptions import TenantConnectionError

if TYPE_CHECKING:
    from infrastructure.settings import TenantSettings
    from tenancy.domain.credentials import CourseCredentials

__all__ = [
    "EngineConnector",
    "build_tenant_url",
]


def build_tenant_url(credentials: CourseCredentials, settings: TenantSettings) -> URL:
    """Build the database URL for a course from its stored credentials.

    The stored endpoint is the hosting provider's project URL; the database
    lives on a sibling host reached by prefixing the project host
    (``https://abcd.supabase.co`` -> ``db.abcd.supabase.co``). The service
    key is the database password.

    Args:
        credentials: Stored course credentials
        settings: Tenant connection settings

    Returns:
        SQLAlchemy URL for the course database

    Raises:
        ValueError: If the endpoint has no host component
    """
    endpoint = credentials.endpoint.strip()
    if "://" not in endpoint:
        endpoint = f"https://{endpoint}"
    host = urlsplit(endpoint).hostname
    if not host:
        raise ValueError(f"Course endpoint has no host: {credentials.endpoint!r}")

    return URL.create(
        drivername=settings.driver,
        username=settings.username,
        password=credentials.service_key.get_secret_value(),
        host=f"{settings.host_prefix}{host}",
        port=settings.port,
        database=settings.database,
    )


class EngineConnector:
    """Opens one ``AsyncEngine`` per course and verifies it answers.

    ``create_async_engine`` is lazy, so a ``SELECT 1`` is issued under the
    configured connect timeout; an unreachable course therefore fails here
    instead of on the first real query, and cannot stall its caller for
    longer than the timeout.
    """

    def __init__(
        self,
        settings: TenantSettings,
        probe: TenantConnectorProbe | None = None,
        engine_factory: Callable[..., AsyncEngine] = create_async_engine,
    ) -> None:
        """Initialize the connector.

        Args:
            settings: Tenant connection settings
            probe: Optional domain probe for observability
            engine_factory: Engine constructor (replaceable in tests)
        """
        self._settings = settings
        self._probe = probe or DefaultTenantConnectorProbe()
        self._engine_factory = engine_factory

    async def connect(
        self, course_id: str, credentials: CourseCredentials
    ) -> EngineTenantHandle:
        """Create and verify a handle for the course database.

        Raises:
            TenantConnectionError: If the URL is malformed, the ping fails or
                the ping exceeds the connect timeout
        """
        try:
            url = build_tenant_url(credentials, self._settings)
        except ValueError as e:
            self._probe.connection_attempt_failed(course_id, None, str(e))
            raise TenantConnectionError(str(e)) from e

        engine = self._engine_factory(url, **self._engine_options())
        try:
            async with asyncio.timeout(self._settings.connect_timeout_seconds):
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
        except (TimeoutError, OSError, SQLAlchemyError) as e:
            await engine.dispose()
            reason = str(e) or type(e).__name__
            self._probe.connection_attempt_failed(course_id, url.host, reason)
            raise TenantConnectionError(
                f"Cannot reach database for course {course_id}: {reason}"
            ) from e
        except BaseException:
            # Cancelled mid-ping; nothing else references the engine
            await engine.dispose()
            raise

        self._probe.connection_verified(course_id, url.host or "")
        return EngineTenantHandle(course_id=course_id, engine=engine)

    def _engine_options(self) -> dict[str, Any]:
        return {
            "pool_size": self._settings.pool_size,
            "max_overflow": 0,
            "pool_pre_ping": True,
            "echo": False,
        }
