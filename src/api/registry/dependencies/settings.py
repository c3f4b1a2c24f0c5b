"""Settings and platform content service dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_registry_session
from registry.application.services import ContentService, SettingsService
from registry.dependencies.user import get_user_repository
from registry.infrastructure.content_repositories import (
    BadgeRepository,
    NotificationRepository,
    PinnedPostRepository,
)
from registry.infrastructure.settings_repository import SettingsRepository
from registry.infrastructure.user_repository import UserRepository


def get_settings_service(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
) -> SettingsService:
    return SettingsService(
        session=session,
        settings_repository=SettingsRepository(session=session),
    )


def get_content_service(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> ContentService:
    return ContentService(
        session=session,
        notification_repository=NotificationRepository(session=session),
        pinned_post_repository=PinnedPostRepository(session=session),
        badge_repository=BadgeRepository(session=session),
        user_repository=user_repository,
    )
