"""Pydantic models for platform settings."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from registry.domain import PlatformSetting


class UpdateSettingRequest(BaseModel):
    value: Any


class SettingResponse(BaseModel):
    key: str
    value: Any
    updated_by: str
    updated_at: datetime

    @classmethod
    def from_domain(cls, setting: PlatformSetting) -> SettingResponse:
        return cls(
            key=setting.key,
            value=setting.value,
            updated_by=setting.updated_by,
            updated_at=setting.updated_at,
        )
