"""Exceptions for the tenancy bounded context.

Neither exception crosses the router: the router converts both into a
``TenantUnavailable`` value. They exist so the collaborators beneath the
router can report failures without swallowing them.
"""

from infrastructure.database.exceptions import DatabaseConnectionError, DatabaseError


class CredentialStoreUnavailableError(DatabaseError):
    """Raised when the registry cannot be read or written for credentials.

    Distinct from "no credentials for this course", which is a normal
    ``None`` result.
    """

    pass


class TenantConnectionError(DatabaseConnectionError):
    """Raised when a connection to a course database cannot be established.

    Covers unreachable hosts, rejected authentication, connect timeouts and
    malformed stored endpoints.
    """

    pass
