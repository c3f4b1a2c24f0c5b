"""Dependency injection for the tenancy bounded context.

The connection cache and the router are process-scoped: they are built once
in the application lifespan and kept on ``app.state``. Request handlers reach
them through ``get_tenant_router``.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.settings import TenantSettings
from tenancy.application import CourseDatabaseRouter, TenantConnectionCache
from tenancy.infrastructure.connector import EngineConnector
from tenancy.infrastructure.credential_store import CredentialStore


def build_tenant_router(
    sessionmaker: async_sessionmaker[AsyncSession],
    settings: TenantSettings,
    cache: TenantConnectionCache | None = None,
) -> CourseDatabaseRouter:
    """Compose the router from its production collaborators.

    Args:
        sessionmaker: Registry sessionmaker backing the credential store
        settings: Tenant connection settings
        cache: Cache to route through; a new one when omitted

    Returns:
        A router ready to be stored on ``app.state``
    """
    return CourseDatabaseRouter(
        credential_store=CredentialStore(sessionmaker),
        connector=EngineConnector(settings),
        cache=cache if cache is not None else TenantConnectionCache(),
    )


def get_tenant_router(request: Request) -> CourseDatabaseRouter:
    """Return the process-scoped router (FastAPI dependency).

    Raises:
        HTTPException: 503 if the application lifespan has not built it
    """
    router = getattr(request.app.state, "tenant_router", None)
    if router is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Course database routing is not initialized",
        )
    return router
