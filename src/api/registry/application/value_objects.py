"""Application-layer value objects for the registry bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from registry.domain import Role, RoleKind, User


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated user of a request together with their roles.

    This is an application-layer concept (not domain) because it represents
    the authentication context of the request, not a stored entity.
    """

    user: User
    roles: tuple[Role, ...] = ()

    @property
    def id(self) -> str:
        return self.user.id

    @property
    def is_creator(self) -> bool:
        return self.user.is_creator

    def has_role(self, kind: RoleKind, scope: str | None = None) -> bool:
        """Whether the user holds ``kind`` (with ``scope`` when given)."""
        return any(
            role.kind == kind and (scope is None or role.scope == scope)
            for role in self.roles
        )
