"""User application service for the registry bounded context.

Handles just-in-time provisioning of verified users, profile changes, bans
and role administration. The creator is protected from every operation that
would remove or reduce their authority.
"""

from __future__ import annotations

import re

from sqlalchemy.ext.asyncio import AsyncSession

from registry.application.authorization import is_privileged
from registry.application.observability import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from registry.application.value_objects import CurrentUser
from registry.domain import Role, RoleKind, User
from registry.ports import (
    CreatorProtectedError,
    DuplicateUsernameError,
    InvalidRoleAssignmentError,
    IRoleRepository,
    IUserRepository,
    RoleNotFoundError,
    UnauthorizedError,
    UserBannedError,
    UserNotFoundError,
)
from shared_kernel.auth import Principal

MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 50
_USERNAME_BASE_LENGTH = 40
_USERNAME_STRIP = re.compile(r"[^A-Za-z0-9_.-]")


def derive_username(principal: Principal) -> str:
    """Pick the initial username for a newly seen principal.

    Prefers the provider's username hint, then the local part of the email
    address, and falls back to ``"user"``.
    """
    candidate = principal.username_hint or principal.email.split("@", 1)[0]
    candidate = _USERNAME_STRIP.sub("", candidate)[:_USERNAME_BASE_LENGTH]
    return candidate or "user"


class UserService:
    """Application service for user management."""

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        role_repository: IRoleRepository,
        probe: UserServiceProbe | None = None,
    ):
        self._session = session
        self._users = user_repository
        self._roles = role_repository
        self._probe = probe or DefaultUserServiceProbe()

    async def ensure_user(self, principal: Principal) -> CurrentUser:
        """Find or create the registry user for a verified principal.

        New users get a unique username and the default ``user`` role,
        recorded as self-assigned.

        Raises:
            UserBannedError: If the user exists and is banned
        """
        try:
            async with self._session.begin():
                user = await self._users.get_by_id(principal.id)
                was_created = user is None
                if user is None:
                    username = await self._unique_username(principal)
                    user = await self._users.add(
                        user_id=principal.id,
                        username=username,
                        email=principal.email,
                    )
                    await self._roles.add(
                        user_id=user.id,
                        kind=RoleKind.USER,
                        assigned_by=user.id,
                    )
                roles = await self._roles.list_for_user(user.id)
        except Exception as e:
            self._probe.user_provision_failed(user_id=principal.id, error=str(e))
            raise

        if user.is_banned:
            self._probe.banned_user_rejected(user.id)
            raise UserBannedError(f"User {user.id} is banned")

        self._probe.user_ensured(
            user_id=user.id, username=user.username, was_created=was_created
        )
        return CurrentUser(user=user, roles=tuple(roles))

    async def update_profile(
        self,
        actor: CurrentUser,
        username: str | None = None,
        email: str | None = None,
    ) -> User:
        """Change the acting user's own username and/or email.

        Raises:
            ValueError: If the username is too short or too long
            DuplicateUsernameError: If another user holds the username
        """
        if username is not None:
            username = username.strip()
            if not MIN_USERNAME_LENGTH <= len(username) <= MAX_USERNAME_LENGTH:
                raise ValueError(
                    f"Username must be between {MIN_USERNAME_LENGTH} and "
                    f"{MAX_USERNAME_LENGTH} characters"
                )

        async with self._session.begin():
            if username is not None and username != actor.user.username:
                holder = await self._users.get_by_username(username)
                if holder is not None and holder.id != actor.id:
                    raise DuplicateUsernameError(f"Username {username!r} is taken")
            updated = await self._users.update_profile(
                actor.id, username=username, email=email
            )
        if updated is None:
            raise UserNotFoundError(f"User {actor.id} not found")
        return updated

    async def list_users(self, actor: CurrentUser) -> list[User]:
        self._require_privileged(actor)
        async with self._session.begin():
            return await self._users.list_all()

    async def get_roles(self, user_id: str) -> list[Role]:
        async with self._session.begin():
            return await self._roles.list_for_user(user_id)

    async def set_banned(self, actor: CurrentUser, user_id: str, banned: bool) -> User:
        """Ban or unban a user.

        Raises:
            UnauthorizedError: If the actor is not privileged
            UserNotFoundError: If the target does not exist
            CreatorProtectedError: If the target is the creator
        """
        self._require_privileged(actor)
        async with self._session.begin():
            target = await self._users.get_by_id(user_id)
            if target is None:
                raise UserNotFoundError(f"User {user_id} not found")
            if target.is_creator:
                self._probe.creator_protection_triggered(user_id, "ban")
                raise CreatorProtectedError("Cannot ban the creator")
            updated = await self._users.set_banned(user_id, banned)

        if updated is None:
            raise UserNotFoundError(f"User {user_id} not found")
        self._probe.ban_changed(user_id=user_id, banned=banned, actor_id=actor.id)
        return updated

    async def assign_role(
        self,
        actor: CurrentUser,
        user_id: str,
        kind: RoleKind,
        scope: str | None = None,
    ) -> Role:
        """Grant a role to a user.

        Raises:
            UnauthorizedError: If the actor is not privileged
            CreatorProtectedError: On granting ``creator`` or demoting the creator
            InvalidRoleAssignmentError: If the scope does not fit the role kind
            UserNotFoundError: If the target does not exist
        """
        self._require_privileged(actor)
        if kind == RoleKind.CREATOR:
            self._probe.creator_protection_triggered(user_id, "grant_creator")
            raise CreatorProtectedError("The creator role cannot be assigned")
        if kind == RoleKind.COURSE_ADMIN and not scope:
            raise InvalidRoleAssignmentError("course_admin requires a course scope")
        if kind != RoleKind.COURSE_ADMIN and scope:
            raise InvalidRoleAssignmentError(f"{kind} cannot be scoped to a course")

        async with self._session.begin():
            target = await self._users.get_by_id(user_id)
            if target is None:
                raise UserNotFoundError(f"User {user_id} not found")
            if target.is_creator and kind == RoleKind.USER:
                self._probe.creator_protection_triggered(user_id, "demote")
                raise CreatorProtectedError("Cannot demote the creator")
            role = await self._roles.add(
                user_id=user_id, kind=kind, scope=scope, assigned_by=actor.id
            )

        self._probe.role_assigned(
            user_id=user_id, kind=kind.value, scope=scope, actor_id=actor.id
        )
        return role

    async def revoke_role(self, actor: CurrentUser, role_id: str) -> None:
        """Remove a role grant.

        Raises:
            UnauthorizedError: If the actor is not privileged
            RoleNotFoundError: If the role does not exist
            CreatorProtectedError: If the grant is the creator's own creator role
        """
        self._require_privileged(actor)
        async with self._session.begin():
            role = await self._roles.get_by_id(role_id)
            if role is None:
                raise RoleNotFoundError(f"Role {role_id} not found")
            if role.kind == RoleKind.CREATOR:
                self._probe.creator_protection_triggered(role.user_id, "revoke")
                raise CreatorProtectedError("The creator role cannot be revoked")
            await self._roles.delete(role_id)

        self._probe.role_revoked(
            role_id=role_id, user_id=role.user_id, actor_id=actor.id
        )

    async def _unique_username(self, principal: Principal) -> str:
        base = derive_username(principal)
        if await self._users.get_by_username(base) is None:
            return base
        return f"{base}_{principal.id[:8]}"

    @staticmethod
    def _require_privileged(actor: CurrentUser) -> None:
        if not is_privileged(actor):
            raise UnauthorizedError("Admin access required")
