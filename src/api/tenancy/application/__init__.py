"""Application layer for the tenancy bounded context."""

from tenancy.application.connection_cache import TenantConnectionCache
from tenancy.application.provisioning import TenantSchemaProvisioner
from tenancy.application.router import CourseDatabaseRouter

__all__ = [
    "CourseDatabaseRouter",
    "TenantConnectionCache",
    "TenantSchemaProvisioner",
]
