"""Pydantic models for user and role administration."""

from __future__ import annotations

from pydantic import BaseModel, Field

from registry.domain import RoleKind


class AssignRoleRequest(BaseModel):
    """Request model for granting a role.

    ``scope`` is the course id and is required for ``course_admin`` only.
    """

    user_id: str = Field(..., min_length=1)
    kind: RoleKind
    scope: str | None = None
