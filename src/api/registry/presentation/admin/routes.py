"""HTTP routes for user and role administration (admins only)."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from registry.application.services import UserService
from registry.application.value_objects import CurrentUser
from registry.dependencies.user import get_current_user, get_user_service
from registry.presentation.admin.models import AssignRoleRequest
from registry.presentation.auth.models import RoleResponse, UserResponse
from registry.presentation.errors import REGISTRY_ERRORS, to_http_exception

router = APIRouter(tags=["admin"])


@router.get("/admin/users")
async def list_users(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> list[UserResponse]:
    try:
        users = await service.list_users(current_user)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return [UserResponse.from_domain(user) for user in users]


@router.post("/admin/users/{user_id}/ban")
async def ban_user(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Ban a user. The creator cannot be banned (400)."""
    try:
        user = await service.set_banned(current_user, user_id, banned=True)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return UserResponse.from_domain(user)


@router.post("/admin/users/{user_id}/unban")
async def unban_user(
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    try:
        user = await service.set_banned(current_user, user_id, banned=False)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return UserResponse.from_domain(user)


@router.post("/roles/assign", status_code=status.HTTP_201_CREATED)
async def assign_role(
    request: AssignRoleRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> RoleResponse:
    """Grant a role.

    Raises:
        HTTPException: 400 when granting ``creator``, demoting the creator
            or when the scope does not fit the role
        HTTPException: 403 if the caller is not an admin
        HTTPException: 404 if the user does not exist
    """
    try:
        role = await service.assign_role(
            current_user, request.user_id, request.kind, request.scope
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return RoleResponse.from_domain(role)


@router.delete("/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_role(
    role_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> None:
    try:
        await service.revoke_role(current_user, role_id)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
