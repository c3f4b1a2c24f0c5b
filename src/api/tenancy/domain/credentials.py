"""Connection parameters for a course (tenant) database."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import SecretStr


@dataclass(frozen=True)
class PublicCourseCredentials:
    """The browser-safe subset of a course's credentials."""

    endpoint: str
    public_key: str


@dataclass(frozen=True)
class CourseCredentials:
    """Stored connection parameters for one course database.

    The service key grants full access to the course database. It is held as
    a ``SecretStr`` so neither ``repr()`` nor structured logging can leak it,
    and it is only unwrapped when the connection URL is built.

    Attributes:
        endpoint: Hosting-provider project URL (e.g. https://abcd.supabase.co)
        public_key: Low-privilege key, safe for browser clients
        service_key: High-privilege key used to open the database connection
    """

    endpoint: str
    public_key: str
    service_key: SecretStr = field(repr=False)

    def public_view(self) -> PublicCourseCredentials:
        """Return the credentials with the service key stripped."""
        return PublicCourseCredentials(
            endpoint=self.endpoint,
            public_key=self.public_key,
        )
