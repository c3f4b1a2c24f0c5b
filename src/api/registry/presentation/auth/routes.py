"""HTTP routes for the authenticated user's own account."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from registry.application.services import UserService
from registry.application.value_objects import CurrentUser
from registry.dependencies.user import get_current_user, get_user_service
from registry.presentation.auth.models import (
    MeResponse,
    UpdateProfileRequest,
    UserResponse,
)
from registry.presentation.errors import REGISTRY_ERRORS, to_http_exception

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MeResponse:
    """Return the caller, provisioning them on first sight."""
    return MeResponse.from_current_user(current_user)


@router.put("/profile")
async def update_profile(
    request: UpdateProfileRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Change the caller's username and/or email.

    Raises:
        HTTPException: 400 if the username is too short or too long
        HTTPException: 409 if the username is taken
    """
    try:
        user = await service.update_profile(
            current_user,
            username=request.username,
            email=request.email,
        )
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return UserResponse.from_domain(user)
