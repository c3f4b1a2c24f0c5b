"""Dependency injection for the community bounded context."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, status

from community.infrastructure.repository import CourseContentRepository
from infrastructure.settings import get_settings, get_tenant_settings
from registry.application.authorization import can_manage_course
from registry.application.services import CourseService
from registry.application.value_objects import CurrentUser
from registry.dependencies.course import get_course_service
from registry.dependencies.user import get_current_user
from registry.presentation.errors import REGISTRY_ERRORS, to_http_exception
from tenancy.application import CourseDatabaseRouter
from tenancy.dependencies import get_tenant_router


def get_content_repository(
    router: Annotated[CourseDatabaseRouter, Depends(get_tenant_router)],
) -> CourseContentRepository:
    """Get a content repository routed through the shared tenant router."""
    return CourseContentRepository(
        router=router,
        page_size=get_settings().default_page_size,
        query_timeout_seconds=get_tenant_settings().query_timeout_seconds,
    )


async def require_course_member(
    course_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    course_service: Annotated[CourseService, Depends(get_course_service)],
) -> CurrentUser:
    """Admit callers who may view the course.

    Raises:
        HTTPException 404: If the course does not exist
        HTTPException 403: If the caller is not an admin or active member
    """
    try:
        await course_service.get_course_for_user(current_user, course_id)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return current_user


async def require_course_manager(
    course_id: str,
    current_user: Annotated[CurrentUser, Depends(require_course_member)],
) -> CurrentUser:
    """Admit admins and this course's course admins only."""
    if not can_manage_course(current_user, course_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Course admin access required",
        )
    return current_user
