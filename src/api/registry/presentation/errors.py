"""Translation of registry exceptions into HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException, status

from registry.ports import (
    CourseNotFoundError,
    CreatorProtectedError,
    DuplicateMembershipError,
    DuplicateUsernameError,
    InvalidRoleAssignmentError,
    InvalidSettingValueError,
    MembershipNotFoundError,
    NotificationNotFoundError,
    PinnedPostNotFoundError,
    RoleNotFoundError,
    UnauthorizedError,
    UserBannedError,
    UserNotFoundError,
)
from tenancy.ports import CredentialStoreUnavailableError

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    UserBannedError: status.HTTP_403_FORBIDDEN,
    CreatorProtectedError: status.HTTP_400_BAD_REQUEST,
    InvalidRoleAssignmentError: status.HTTP_400_BAD_REQUEST,
    InvalidSettingValueError: status.HTTP_400_BAD_REQUEST,
    ValueError: status.HTTP_400_BAD_REQUEST,
    CourseNotFoundError: status.HTTP_404_NOT_FOUND,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    MembershipNotFoundError: status.HTTP_404_NOT_FOUND,
    RoleNotFoundError: status.HTTP_404_NOT_FOUND,
    NotificationNotFoundError: status.HTTP_404_NOT_FOUND,
    PinnedPostNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateMembershipError: status.HTTP_409_CONFLICT,
    DuplicateUsernameError: status.HTTP_409_CONFLICT,
    CredentialStoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

REGISTRY_ERRORS: tuple[type[Exception], ...] = tuple(_STATUS_BY_ERROR)


def to_http_exception(error: Exception) -> HTTPException:
    """Map a registry exception to the matching HTTP error.

    Exceptions not listed map to 500.
    """
    for error_type in type(error).__mro__:
        code = _STATUS_BY_ERROR.get(error_type)
        if code is not None:
            return HTTPException(status_code=code, detail=str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(error),
    )
