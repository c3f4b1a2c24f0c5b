"""HTTP routes for the course catalogue and memberships.

Course credentials are accepted on registration and rotation but never
returned; members may read only the browser-safe subset.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from registry.application.services import CourseService
from registry.application.value_objects import CurrentUser
from registry.dependencies.course import get_course_service
from registry.dependencies.user import get_current_user
from registry.presentation.courses.models import (
    AddMemberRequest,
    CourseResponse,
    CreateCourseRequest,
    CredentialsRequest,
    MembershipResponse,
    PublicCredentialsResponse,
    UpdateCourseRequest,
    UpdateMembershipRequest,
)
from registry.presentation.errors import REGISTRY_ERRORS, to_http_exception

router = APIRouter(tags=["courses"])


@router.get("/courses")
async def list_courses(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> list[CourseResponse]:
    """List the courses visible to the caller."""
    courses = await service.list_visible_courses(current_user)
    return [CourseResponse.from_domain(course) for course in courses]


@router.post("/courses", status_code=status.HTTP_201_CREATED)
async def create_course(
    request: CreateCourseRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> CourseResponse:
    """Register a course with its database credentials.

    Raises:
        HTTPException: 403 if the caller is not an admin
        HTTPException: 503 if the credentials could not be stored
    """
    try:
        course = await service.create_course(
            current_user,
            name=request.name,
            credentials=request.credentials.to_domain(),
            description=request.description,
            lecturer=request.lecturer,
            course_rep=request.course_rep,
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return CourseResponse.from_domain(course)


@router.get("/courses/{course_id}")
async def get_course(
    course_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> CourseResponse:
    """Get a course the caller may view (404 if missing, 403 if not allowed)."""
    try:
        course = await service.get_course_for_user(current_user, course_id)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return CourseResponse.from_domain(course)


@router.patch("/courses/{course_id}")
async def update_course(
    course_id: str,
    request: UpdateCourseRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> CourseResponse:
    try:
        course = await service.update_course(
            current_user, course_id, **request.model_dump(exclude_unset=True)
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return CourseResponse.from_domain(course)


@router.get("/courses/{course_id}/credentials")
async def get_course_credentials(
    course_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> PublicCredentialsResponse:
    """Return the browser-safe connection parameters of a course."""
    try:
        credentials = await service.get_public_credentials(current_user, course_id)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return PublicCredentialsResponse.from_domain(credentials)


@router.put("/courses/{course_id}/credentials", status_code=status.HTTP_204_NO_CONTENT)
async def rotate_course_credentials(
    course_id: str,
    request: CredentialsRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> None:
    """Replace a course's credentials; new connections use them at once."""
    try:
        await service.rotate_credentials(current_user, course_id, request.to_domain())
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e


@router.get("/courses/{course_id}/members")
async def list_course_members(
    course_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> list[MembershipResponse]:
    try:
        memberships = await service.list_members(current_user, course_id)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return [MembershipResponse.from_domain(m) for m in memberships]


@router.post("/courses/{course_id}/members", status_code=status.HTTP_201_CREATED)
async def add_course_member(
    course_id: str,
    request: AddMemberRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> MembershipResponse:
    """Enrol a user in a course (admins, or this course's course admins).

    Raises:
        HTTPException: 403 if the caller cannot manage the course
        HTTPException: 404 if the course or user does not exist
        HTTPException: 409 if the user is already a member
    """
    try:
        membership = await service.add_member(
            current_user, course_id, request.user_id, request.role
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return MembershipResponse.from_domain(membership)


@router.get("/memberships")
async def list_my_memberships(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> list[MembershipResponse]:
    memberships = await service.list_my_memberships(current_user)
    return [MembershipResponse.from_domain(m) for m in memberships]


@router.patch("/memberships/{membership_id}")
async def update_membership(
    membership_id: str,
    request: UpdateMembershipRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> MembershipResponse:
    """Suspend or reactivate a membership."""
    try:
        membership = await service.set_membership_status(
            current_user, membership_id, request.status
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return MembershipResponse.from_domain(membership)
