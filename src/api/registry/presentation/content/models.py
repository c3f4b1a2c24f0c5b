"""Pydantic models for notifications, pinned posts and badges."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from registry.domain import Notification, PinnedPost, UserBadge


class CreateNotificationRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    kind: str = Field("info", max_length=50)
    data: dict[str, Any] | None = None


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    kind: str
    data: dict[str, Any] | None
    is_read: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, notification: Notification) -> NotificationResponse:
        return cls(
            id=notification.id,
            title=notification.title,
            message=notification.message,
            kind=notification.kind,
            data=notification.data,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


class CreatePinnedPostRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class UpdatePinnedPostRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)
    is_pinned: bool | None = None


class PinnedPostResponse(BaseModel):
    id: str
    title: str
    content: str
    author_id: str
    is_pinned: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, post: PinnedPost) -> PinnedPostResponse:
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author_id=post.author_id,
            is_pinned=post.is_pinned,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class AwardBadgeRequest(BaseModel):
    badge_type: str = Field(..., min_length=1, max_length=50)
    badge_data: dict[str, Any] | None = None
    course_id: str | None = None


class BadgeResponse(BaseModel):
    id: str
    badge_type: str
    badge_data: dict[str, Any] | None
    course_id: str | None
    earned_at: datetime

    @classmethod
    def from_domain(cls, badge: UserBadge) -> BadgeResponse:
        return cls(
            id=badge.id,
            badge_type=badge.badge_type,
            badge_data=badge.badge_data,
            course_id=badge.course_id,
            earned_at=badge.earned_at,
        )
