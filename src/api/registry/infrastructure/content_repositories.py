"""PostgreSQL implementations for registry-level content.

Notifications, platform-wide pinned posts and user badges.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from registry.domain import Notification, PinnedPost, UserBadge
from registry.infrastructure.models import (
    NotificationModel,
    PinnedPostModel,
    UserBadgeModel,
)
from registry.ports.repositories import (
    IBadgeRepository,
    INotificationRepository,
    IPinnedPostRepository,
)

_PINNED_POST_FIELDS = frozenset({"title", "content", "is_pinned"})


class NotificationRepository(INotificationRepository):
    """PostgreSQL-backed repository for notifications."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        user_id: str,
        title: str,
        message: str,
        kind: str,
        data: dict[str, Any] | None = None,
    ) -> Notification:
        model = NotificationModel(
            id=str(ULID()),
            user_id=user_id,
            title=title,
            message=message,
            kind=kind,
            data=data,
            is_read=False,
            created_at=datetime.now(UTC),
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_domain(model)

    async def list_for_user(self, user_id: str) -> list[Notification]:
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at, NotificationModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def mark_read(
        self, notification_id: str, user_id: str
    ) -> Notification | None:
        stmt = select(NotificationModel).where(
            NotificationModel.id == notification_id,
            NotificationModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        model.is_read = True
        await self._session.flush()
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            message=model.message,
            kind=model.kind,
            data=model.data,
            is_read=model.is_read,
            created_at=model.created_at,
        )


class PinnedPostRepository(IPinnedPostRepository):
    """PostgreSQL-backed repository for platform-wide pinned posts."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, title: str, content: str, author_id: str) -> PinnedPost:
        now = datetime.now(UTC)
        model = PinnedPostModel(
            id=str(ULID()),
            title=title,
            content=content,
            author_id=author_id,
            is_pinned=True,
            created_at=now,
            updated_at=now,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_domain(model)

    async def list_pinned(self) -> list[PinnedPost]:
        stmt = (
            select(PinnedPostModel)
            .where(PinnedPostModel.is_pinned.is_(True))
            .order_by(PinnedPostModel.created_at, PinnedPostModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def update(self, post_id: str, **changes: Any) -> PinnedPost | None:
        """Apply changes to a pinned post.

        Raises:
            ValueError: If a change names a column that cannot be updated
        """
        unknown = set(changes) - _PINNED_POST_FIELDS
        if unknown:
            raise ValueError(f"Cannot update pinned post fields: {sorted(unknown)}")

        model = await self._find(post_id)
        if model is None:
            return None
        for field_name, value in changes.items():
            setattr(model, field_name, value)
        model.updated_at = datetime.now(UTC)
        await self._session.flush()
        return self._to_domain(model)

    async def delete(self, post_id: str) -> bool:
        model = await self._find(post_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    async def _find(self, post_id: str) -> PinnedPostModel | None:
        stmt = select(PinnedPostModel).where(PinnedPostModel.id == post_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: PinnedPostModel) -> PinnedPost:
        return PinnedPost(
            id=model.id,
            title=model.title,
            content=model.content,
            author_id=model.author_id,
            is_pinned=model.is_pinned,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class BadgeRepository(IBadgeRepository):
    """PostgreSQL-backed repository for awarded badges."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        user_id: str,
        badge_type: str,
        badge_data: dict[str, Any] | None = None,
        course_id: str | None = None,
    ) -> UserBadge:
        model = UserBadgeModel(
            id=str(ULID()),
            user_id=user_id,
            badge_type=badge_type,
            badge_data=badge_data,
            course_id=course_id,
            earned_at=datetime.now(UTC),
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_domain(model)

    async def list_for_user(self, user_id: str) -> list[UserBadge]:
        stmt = (
            select(UserBadgeModel)
            .where(UserBadgeModel.user_id == user_id)
            .order_by(UserBadgeModel.earned_at, UserBadgeModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    @staticmethod
    def _to_domain(model: UserBadgeModel) -> UserBadge:
        return UserBadge(
            id=model.id,
            user_id=model.user_id,
            badge_type=model.badge_type,
            badge_data=model.badge_data,
            course_id=model.course_id,
            earned_at=model.earned_at,
        )
