"""PostgreSQL implementation of IMembershipRepository."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from registry.domain import CourseMembership, CourseRole, MembershipStatus
from registry.infrastructure.models import CourseMembershipModel
from registry.ports.repositories import IMembershipRepository


class MembershipRepository(IMembershipRepository):
    """PostgreSQL-backed repository for course memberships."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self, user_id: str, course_id: str, role: CourseRole = CourseRole.STUDENT
    ) -> CourseMembership:
        model = CourseMembershipModel(
            id=str(ULID()),
            user_id=user_id,
            course_id=course_id,
            role=role.value,
            status=MembershipStatus.ACTIVE.value,
            joined_at=datetime.now(UTC),
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_domain(model)

    async def get_by_id(self, membership_id: str) -> CourseMembership | None:
        model = await self._find(membership_id)
        return self._to_domain(model) if model is not None else None

    async def get(self, user_id: str, course_id: str) -> CourseMembership | None:
        stmt = select(CourseMembershipModel).where(
            CourseMembershipModel.user_id == user_id,
            CourseMembershipModel.course_id == course_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def list_for_user(self, user_id: str) -> list[CourseMembership]:
        stmt = (
            select(CourseMembershipModel)
            .where(CourseMembershipModel.user_id == user_id)
            .order_by(CourseMembershipModel.joined_at, CourseMembershipModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_for_course(self, course_id: str) -> list[CourseMembership]:
        stmt = (
            select(CourseMembershipModel)
            .where(CourseMembershipModel.course_id == course_id)
            .order_by(CourseMembershipModel.joined_at, CourseMembershipModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_all(self) -> list[CourseMembership]:
        stmt = select(CourseMembershipModel).order_by(
            CourseMembershipModel.joined_at, CourseMembershipModel.id
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def update_status(
        self, membership_id: str, status: MembershipStatus
    ) -> CourseMembership | None:
        model = await self._find(membership_id)
        if model is None:
            return None
        model.status = status.value
        await self._session.flush()
        return self._to_domain(model)

    async def delete(self, membership_id: str) -> bool:
        model = await self._find(membership_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    async def _find(self, membership_id: str) -> CourseMembershipModel | None:
        stmt = select(CourseMembershipModel).where(
            CourseMembershipModel.id == membership_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: CourseMembershipModel) -> CourseMembership:
        return CourseMembership(
            id=model.id,
            user_id=model.user_id,
            course_id=model.course_id,
            role=CourseRole(model.role),
            status=MembershipStatus(model.status),
            joined_at=model.joined_at,
        )
