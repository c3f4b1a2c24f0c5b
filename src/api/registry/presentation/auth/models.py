"""Pydantic models for the current user's account."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from registry.application.value_objects import CurrentUser
from registry.domain import Role, RoleKind, User


class RoleResponse(BaseModel):
    id: str
    kind: RoleKind
    scope: str | None = Field(None, description="Course id for course_admin roles")
    assigned_by: str | None
    created_at: datetime

    @classmethod
    def from_domain(cls, role: Role) -> RoleResponse:
        return cls(
            id=role.id,
            kind=role.kind,
            scope=role.scope,
            assigned_by=role.assigned_by,
            created_at=role.created_at,
        )


class UserResponse(BaseModel):
    """Response model for a platform user."""

    id: str = Field(..., description="Identity-provider user id")
    username: str
    email: str
    is_creator: bool
    is_banned: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            is_creator=user.is_creator,
            is_banned=user.is_banned,
            created_at=user.created_at,
        )


class MeResponse(BaseModel):
    """The authenticated user together with their roles."""

    user: UserResponse
    roles: list[RoleResponse]

    @classmethod
    def from_current_user(cls, current_user: CurrentUser) -> MeResponse:
        return cls(
            user=UserResponse.from_domain(current_user.user),
            roles=[RoleResponse.from_domain(role) for role in current_user.roles],
        )


class UpdateProfileRequest(BaseModel):
    """Request model for changing the caller's own profile."""

    username: str | None = Field(None, description="New username (3-50 characters)")
    email: str | None = Field(None, description="New email address")
