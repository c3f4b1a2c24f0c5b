"""Protocols (ports) for the tenancy bounded context."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from tenancy.domain.credentials import CourseCredentials

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@runtime_checkable
class TenantHandle(Protocol):
    """A live, shareable connection to one course database.

    Handles are shared by every concurrent request touching the course;
    nothing owns one exclusively. Each unit of work opens its own session.
    """

    @property
    def course_id(self) -> str:
        """The course this handle is bound to."""
        ...

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        ...

    def session(self) -> AsyncSession:
        """Open a new session (usable as an async context manager)."""
        ...

    async def close(self) -> None:
        """Release every connection held by the handle. Idempotent."""
        ...


@runtime_checkable
class ICredentialStore(Protocol):
    """Durable mapping course id -> connection parameters."""

    async def put(
        self,
        course_id: str,
        credentials: CourseCredentials,
        session: AsyncSession | None = None,
    ) -> None:
        """Insert or replace the credentials for a course.

        Args:
            course_id: The course the credentials belong to
            credentials: Connection parameters to store
            session: Optional registry session whose transaction the write
                joins; when omitted the store commits on its own

        Raises:
            CredentialStoreUnavailableError: If the registry write fails
        """
        ...

    async def get(self, course_id: str) -> CourseCredentials | None:
        """Look up the credentials for a course.

        Returns:
            The credentials, or None when the course has none stored

        Raises:
            CredentialStoreUnavailableError: If the registry read fails
        """
        ...


@runtime_checkable
class ITenantConnector(Protocol):
    """Establishes connections to course databases."""

    async def connect(
        self, course_id: str, credentials: CourseCredentials
    ) -> TenantHandle:
        """Open and verify a connection to the course database.

        Raises:
            TenantConnectionError: If the database cannot be reached
        """
        ...
