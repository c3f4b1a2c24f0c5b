"""PostgreSQL implementation of ISettingsRepository."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from registry.domain import PlatformSetting
from registry.infrastructure.models import PlatformSettingModel
from registry.ports.repositories import ISettingsRepository


class SettingsRepository(ISettingsRepository):
    """PostgreSQL-backed repository for platform settings."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, key: str) -> PlatformSetting | None:
        model = await self._find(key)
        return self._to_domain(model) if model is not None else None

    async def list_all(self) -> list[PlatformSetting]:
        stmt = select(PlatformSettingModel).order_by(PlatformSettingModel.key)
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def upsert(self, key: str, value: Any, updated_by: str) -> PlatformSetting:
        now = datetime.now(UTC)
        model = await self._find(key)
        if model is None:
            model = PlatformSettingModel(
                key=key, value=value, updated_by=updated_by, updated_at=now
            )
            self._session.add(model)
        else:
            model.value = value
            model.updated_by = updated_by
            model.updated_at = now
        await self._session.flush()
        return self._to_domain(model)

    async def _find(self, key: str) -> PlatformSettingModel | None:
        stmt = select(PlatformSettingModel).where(PlatformSettingModel.key == key)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: PlatformSettingModel) -> PlatformSetting:
        return PlatformSetting(
            key=model.key,
            value=model.value,
            updated_by=model.updated_by,
            updated_at=model.updated_at,
        )
