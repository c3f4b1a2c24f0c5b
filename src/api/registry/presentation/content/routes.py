"""HTTP routes for notifications, pinned announcements and badges."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from registry.application.services import ContentService
from registry.application.value_objects import CurrentUser
from registry.dependencies.settings import get_content_service
from registry.dependencies.user import get_current_user, get_optional_user
from registry.presentation.content.models import (
    AwardBadgeRequest,
    BadgeResponse,
    CreateNotificationRequest,
    CreatePinnedPostRequest,
    NotificationResponse,
    PinnedPostResponse,
    UpdatePinnedPostRequest,
)
from registry.presentation.errors import REGISTRY_ERRORS, to_http_exception

router = APIRouter(tags=["content"])


@router.get("/notifications")
async def list_notifications(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> list[NotificationResponse]:
    notifications = await service.list_notifications(current_user)
    return [NotificationResponse.from_domain(n) for n in notifications]


@router.post("/notifications", status_code=status.HTTP_201_CREATED)
async def create_notification(
    request: CreateNotificationRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> NotificationResponse:
    try:
        notification = await service.notify(
            current_user,
            user_id=request.user_id,
            title=request.title,
            message=request.message,
            kind=request.kind,
            data=request.data,
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return NotificationResponse.from_domain(notification)


@router.post("/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> NotificationResponse:
    try:
        notification = await service.mark_notification_read(
            current_user, notification_id
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return NotificationResponse.from_domain(notification)


@router.get("/pinned")
async def list_pinned_posts(
    current_user: Annotated[CurrentUser | None, Depends(get_optional_user)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> list[PinnedPostResponse]:
    """List pinned announcements; anonymous callers may read them."""
    posts = await service.list_pinned()
    return [PinnedPostResponse.from_domain(post) for post in posts]


@router.post("/pinned", status_code=status.HTTP_201_CREATED)
async def create_pinned_post(
    request: CreatePinnedPostRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> PinnedPostResponse:
    try:
        post = await service.create_pinned(current_user, request.title, request.content)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return PinnedPostResponse.from_domain(post)


@router.put("/pinned/{post_id}")
async def update_pinned_post(
    post_id: str,
    request: UpdatePinnedPostRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> PinnedPostResponse:
    try:
        post = await service.update_pinned(
            current_user, post_id, **request.model_dump(exclude_unset=True)
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return PinnedPostResponse.from_domain(post)


@router.delete("/pinned/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pinned_post(
    post_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> None:
    try:
        await service.delete_pinned(current_user, post_id)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e


@router.get("/users/{user_id}/badges")
async def list_badges(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> list[BadgeResponse]:
    badges = await service.list_badges(user_id)
    return [BadgeResponse.from_domain(badge) for badge in badges]


@router.post("/users/{user_id}/badges", status_code=status.HTTP_201_CREATED)
async def award_badge(
    user_id: str,
    request: AwardBadgeRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ContentService, Depends(get_content_service)],
) -> BadgeResponse:
    try:
        badge = await service.award_badge(
            current_user,
            user_id,
            request.badge_type,
            badge_data=request.badge_data,
            course_id=request.course_id,
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return BadgeResponse.from_domain(badge)
