"""PostgreSQL implementation of IRoleRepository."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from registry.domain import Role, RoleKind
from registry.infrastructure.models import RoleModel
from registry.ports.repositories import IRoleRepository


class RoleRepository(IRoleRepository):
    """PostgreSQL-backed repository for role grants."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        user_id: str,
        kind: RoleKind,
        scope: str | None = None,
        assigned_by: str | None = None,
    ) -> Role:
        model = RoleModel(
            id=str(ULID()),
            user_id=user_id,
            kind=kind.value,
            scope=scope,
            assigned_by=assigned_by,
            created_at=datetime.now(UTC),
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_domain(model)

    async def get_by_id(self, role_id: str) -> Role | None:
        model = await self._find(role_id)
        return self._to_domain(model) if model is not None else None

    async def list_for_user(self, user_id: str) -> list[Role]:
        stmt = (
            select(RoleModel)
            .where(RoleModel.user_id == user_id)
            .order_by(RoleModel.created_at, RoleModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def delete(self, role_id: str) -> bool:
        model = await self._find(role_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    async def _find(self, role_id: str) -> RoleModel | None:
        stmt = select(RoleModel).where(RoleModel.id == role_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: RoleModel) -> Role:
        return Role(
            id=model.id,
            user_id=model.user_id,
            kind=RoleKind(model.kind),
            scope=model.scope,
            assigned_by=model.assigned_by,
            created_at=model.created_at,
        )
