"""Ports for collaborators the registry uses but does not own."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from registry.domain import Course, CourseMembership, User


@runtime_checkable
class IRegistryDirectory(Protocol):
    """Read-only registry view for process-scoped consumers.

    Unlike the repositories it is not bound to a request session; each call
    reads through its own short-lived session.
    """

    async def list_users(self) -> list[User]:
        """List every user, oldest first."""
        ...

    async def list_memberships(self, user_id: str | None = None) -> list[CourseMembership]:
        """List memberships in join order, for one user or for everyone."""
        ...

    async def get_courses(self, course_ids: list[str]) -> dict[str, Course]:
        """Map the given ids to their courses (unknown ids are absent)."""
        ...


@runtime_checkable
class ISchemaProvisioner(Protocol):
    """Creates the tenant table set on a course database."""

    async def provision(self, course_id: str) -> bool:
        """Returns False when the course database could not be used."""
        ...


@runtime_checkable
class ITenantHandleInvalidator(Protocol):
    """Drops a course's cached database handle after its credentials change."""

    async def invalidate(self, course_id: str) -> bool:
        ...
