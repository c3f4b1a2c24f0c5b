"""Database-specific exceptions shared across bounded contexts."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when a database connection cannot be established."""

    pass
