"""Ports for the tenancy bounded context."""

from tenancy.ports.exceptions import (
    CredentialStoreUnavailableError,
    TenantConnectionError,
)
from tenancy.ports.protocols import ICredentialStore, ITenantConnector, TenantHandle

__all__ = [
    "CredentialStoreUnavailableError",
    "ICredentialStore",
    "ITenantConnector",
    "TenantConnectionError",
    "TenantHandle",
]
