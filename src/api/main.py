"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

# Registers the course tables on TenantBase.metadata.
import community.infrastructure.models  # noqa: F401
from community.infrastructure.repository import CourseContentRepository
from community.presentation import router as community_router
from infrastructure.database.dependencies import (
    close_registry_connections,
    get_registry_sessionmaker,
)
from infrastructure.database.models import TenantBase
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_identity_settings,
    get_insights_settings,
    get_settings,
    get_tenant_settings,
)
from infrastructure.version import __version__
from insights.application import CrossTenantAggregator
from insights.presentation import router as insights_router
from registry.infrastructure.directory import RegistryDirectory
from registry.presentation import router as registry_router
from shared_kernel.auth import SupabaseIdentityVerifier
from tenancy.application import TenantSchemaProvisioner
from tenancy.dependencies import build_tenant_router


@asynccontextmanager
async def coursehub_lifespan(app: FastAPI):
    """Application lifespan context.

    Builds the process-scoped collaborators (tenant router and its cache,
    identity verifier, aggregator) on startup and releases every tenant
    handle, the identity client and the registry engine on shutdown.
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()

    # Fails fast when DATABASE_URL is missing.
    sessionmaker = get_registry_sessionmaker()
    tenant_settings = get_tenant_settings()

    router = build_tenant_router(sessionmaker, tenant_settings)
    verifier = SupabaseIdentityVerifier(get_identity_settings())
    if not verifier.configured:
        probe.identity_provider_unconfigured()

    app.state.tenant_router = router
    app.state.identity_verifier = verifier
    app.state.aggregator = CrossTenantAggregator(
        directory=RegistryDirectory(sessionmaker),
        content_repository=CourseContentRepository(
            router=router,
            page_size=settings.default_page_size,
            query_timeout_seconds=tenant_settings.query_timeout_seconds,
        ),
        settings=get_insights_settings(),
    )
    app.state.schema_provisioner = (
        TenantSchemaProvisioner(router=router, metadata=TenantBase.metadata)
        if tenant_settings.provision_on_create
        else None
    )

    probe.application_started(app_name=settings.app_name, version=__version__)
    try:
        yield
    finally:
        closed = await router.cache.close_all()
        probe.tenant_connections_closed(closed)
        await verifier.aclose()
        await close_registry_connections()


app = FastAPI(
    title="CourseHub API",
    description="Multi-tenant course community platform",
    version=__version__,
    lifespan=coursehub_lifespan,
)

app.include_router(registry_router, prefix="/api")
app.include_router(community_router, prefix="/api")
app.include_router(insights_router, prefix="/api")


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
