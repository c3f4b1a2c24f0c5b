"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from registry.domain import User
from registry.infrastructure.models import UserModel
from registry.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from registry.ports.repositories import IUserRepository


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for platform users.

    Users are provisioned on their first verified request, so ``add`` is the
    only path that creates rows. The creator flag is never written here.
    """

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def add(self, user_id: str, username: str, email: str) -> User:
        now = datetime.now(UTC)
        model = UserModel(
            id=user_id,
            username=username,
            email=email,
            is_creator=False,
            is_banned=False,
            created_at=now,
            updated_at=now,
        )
        self._session.add(model)
        await self._session.flush()

        self._probe.user_created(user_id, username)
        return self._to_domain(model)

    async def get_by_id(self, user_id: str) -> User | None:
        model = await self._find(user_id)
        if model is None:
            self._probe.user_not_found(user_id)
            return None
        return self._to_domain(model)

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(UserModel).where(UserModel.username == username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == email).limit(1)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def list_all(self) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.created_at, UserModel.id)
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def update_profile(
        self,
        user_id: str,
        username: str | None = None,
        email: str | None = None,
    ) -> User | None:
        model = await self._find(user_id)
        if model is None:
            self._probe.user_not_found(user_id)
            return None

        if username is not None:
            model.username = username
        if email is not None:
            model.email = email
        model.updated_at = datetime.now(UTC)
        await self._session.flush()

        self._probe.user_updated(user_id)
        return self._to_domain(model)

    async def set_banned(self, user_id: str, banned: bool) -> User | None:
        model = await self._find(user_id)
        if model is None:
            self._probe.user_not_found(user_id)
            return None

        model.is_banned = banned
        model.updated_at = datetime.now(UTC)
        await self._session.flush()

        self._probe.user_updated(user_id)
        return self._to_domain(model)

    async def _find(self, user_id: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            is_creator=model.is_creator,
            is_banned=model.is_banned,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
