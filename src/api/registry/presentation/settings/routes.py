"""HTTP routes for platform settings.

Reading is open to anonymous callers, who only see the public keys.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status

from registry.application.services import SettingsService
from registry.application.value_objects import CurrentUser
from registry.dependencies.settings import get_settings_service
from registry.dependencies.user import get_current_user, get_optional_user
from registry.presentation.errors import REGISTRY_ERRORS, to_http_exception
from registry.presentation.settings.models import (
    SettingResponse,
    UpdateSettingRequest,
)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
async def get_settings(
    current_user: Annotated[CurrentUser | None, Depends(get_optional_user)],
    service: Annotated[SettingsService, Depends(get_settings_service)],
) -> dict[str, Any]:
    return await service.get_all(current_user)


@router.get("/{key}")
async def get_setting(
    key: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[SettingsService, Depends(get_settings_service)],
) -> SettingResponse:
    setting = await service.get(key)
    if setting is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Setting {key!r} not found",
        )
    return SettingResponse.from_domain(setting)


@router.put("/{key}")
async def update_setting(
    key: str,
    request: UpdateSettingRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[SettingsService, Depends(get_settings_service)],
) -> SettingResponse:
    """Store a setting (admins only; well-known keys are type checked)."""
    try:
        setting = await service.update(current_user, key, request.value)
    except REGISTRY_ERRORS as e:
        raise to_http_exception(e) from e
    return SettingResponse.from_domain(setting)
