"""PostgreSQL implementation of ICourseRepository."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from registry.domain import Course
from registry.infrastructure.models import CourseModel
from registry.ports.repositories import ICourseRepository

_UPDATABLE_FIELDS = frozenset(
    {"name", "description", "lecturer", "course_rep", "is_active"}
)


class CourseRepository(ICourseRepository):
    """PostgreSQL-backed repository for the course catalogue."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        name: str,
        created_by: str,
        description: str | None = None,
        lecturer: str | None = None,
        course_rep: str | None = None,
    ) -> Course:
        now = datetime.now(UTC)
        model = CourseModel(
            id=str(ULID()),
            name=name,
            description=description,
            lecturer=lecturer,
            course_rep=course_rep,
            is_active=True,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_domain(model)

    async def get_by_id(self, course_id: str) -> Course | None:
        model = await self._find(course_id)
        return self._to_domain(model) if model is not None else None

    async def get_many(self, course_ids: list[str]) -> list[Course]:
        if not course_ids:
            return []
        stmt = select(CourseModel).where(CourseModel.id.in_(course_ids))
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_all(self, include_inactive: bool = False) -> list[Course]:
        stmt = select(CourseModel)
        if not include_inactive:
            stmt = stmt.where(CourseModel.is_active.is_(True))
        stmt = stmt.order_by(CourseModel.created_at, CourseModel.id)
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def update(self, course_id: str, **changes: Any) -> Course | None:
        """Apply changes to the updatable course columns.

        Raises:
            ValueError: If a change names a column that cannot be updated
        """
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update course fields: {sorted(unknown)}")

        model = await self._find(course_id)
        if model is None:
            return None

        for field_name, value in changes.items():
            setattr(model, field_name, value)
        model.updated_at = datetime.now(UTC)
        await self._session.flush()
        return self._to_domain(model)

    async def _find(self, course_id: str) -> CourseModel | None:
        stmt = select(CourseModel).where(CourseModel.id == course_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: CourseModel) -> Course:
        return Course(
            id=model.id,
            name=model.name,
            description=model.description,
            lecturer=model.lecturer,
            course_rep=model.course_rep,
            is_active=model.is_active,
            created_by=model.created_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
