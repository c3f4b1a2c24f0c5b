"""Service for platform-wide content kept in the registry.

Covers user notifications, pinned announcements and awarded badges.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from registry.application.authorization import is_privileged
from registry.application.value_objects import CurrentUser
from registry.domain import Notification, PinnedPost, UserBadge
from registry.ports import (
    IBadgeRepository,
    INotificationRepository,
    IPinnedPostRepository,
    IUserRepository,
    NotificationNotFoundError,
    PinnedPostNotFoundError,
    UnauthorizedError,
    UserNotFoundError,
)


class ContentService:
    def __init__(
        self,
        session: AsyncSession,
        notification_repository: INotificationRepository,
        pinned_post_repository: IPinnedPostRepository,
        badge_repository: IBadgeRepository,
        user_repository: IUserRepository,
    ):
        self._session = session
        self._notifications = notification_repository
        self._pinned = pinned_post_repository
        self._badges = badge_repository
        self._users = user_repository

    async def list_notifications(self, actor: CurrentUser) -> list[Notification]:
        async with self._session.begin():
            return await self._notifications.list_for_user(actor.id)

    async def notify(
        self,
        actor: CurrentUser,
        user_id: str,
        title: str,
        message: str,
        kind: str = "info",
        data: dict[str, Any] | None = None,
    ) -> Notification:
        self._require_privileged(actor)
        async with self._session.begin():
            if await self._users.get_by_id(user_id) is None:
                raise UserNotFoundError(f"User {user_id} not found")
            return await self._notifications.add(user_id, title, message, kind, data)

    async def mark_notification_read(
        self, actor: CurrentUser, notification_id: str
    ) -> Notification:
        async with self._session.begin():
            notification = await self._notifications.mark_read(
                notification_id, actor.id
            )
        if notification is None:
            raise NotificationNotFoundError(f"Notification {notification_id} not found")
        return notification

    async def list_pinned(self) -> list[PinnedPost]:
        async with self._session.begin():
            return await self._pinned.list_pinned()

    async def create_pinned(
        self, actor: CurrentUser, title: str, content: str
    ) -> PinnedPost:
        self._require_privileged(actor)
        async with self._session.begin():
            return await self._pinned.add(title, content, author_id=actor.id)

    async def update_pinned(
        self, actor: CurrentUser, post_id: str, **changes: Any
    ) -> PinnedPost:
        self._require_privileged(actor)
        async with self._session.begin():
            post = await self._pinned.update(post_id, **changes)
        if post is None:
            raise PinnedPostNotFoundError(f"Pinned post {post_id} not found")
        return post

    async def delete_pinned(self, actor: CurrentUser, post_id: str) -> None:
        self._require_privileged(actor)
        async with self._session.begin():
            deleted = await self._pinned.delete(post_id)
        if not deleted:
            raise PinnedPostNotFoundError(f"Pinned post {post_id} not found")

    async def award_badge(
        self,
        actor: CurrentUser,
        user_id: str,
        badge_type: str,
        badge_data: dict[str, Any] | None = None,
        course_id: str | None = None,
    ) -> UserBadge:
        self._require_privileged(actor)
        async with self._session.begin():
            if await self._users.get_by_id(user_id) is None:
                raise UserNotFoundError(f"User {user_id} not found")
            return await self._badges.add(user_id, badge_type, badge_data, course_id)

    async def list_badges(self, user_id: str) -> list[UserBadge]:
        async with self._session.begin():
            return await self._badges.list_for_user(user_id)

    @staticmethod
    def _require_privileged(actor: CurrentUser) -> None:
        if not is_privileged(actor):
            raise UnauthorizedError("Admin access required")
