"""Authentication and user service dependencies for the registry context.

Bearer tokens are verified by the process-scoped identity verifier; the
verified principal is then provisioned just-in-time as a registry user.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_registry_session
from registry.application.observability import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from registry.application.services import UserService
from registry.application.value_objects import CurrentUser
from registry.infrastructure.role_repository import RoleRepository
from registry.infrastructure.user_repository import UserRepository
from registry.ports import UserBannedError
from shared_kernel.auth import IdentityVerifier, Principal

bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_verifier(request: Request) -> IdentityVerifier:
    """Return the process-scoped identity verifier (FastAPI dependency).

    Raises:
        HTTPException: 503 if the application lifespan has not built it
    """
    verifier = getattr(request.app.state, "identity_verifier", None)
    if verifier is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not initialized",
        )
    return verifier


def get_user_service_probe() -> UserServiceProbe:
    return DefaultUserServiceProbe()


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
) -> UserRepository:
    return UserRepository(session=session)


def get_role_repository(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
) -> RoleRepository:
    return RoleRepository(session=session)


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    role_repository: Annotated[RoleRepository, Depends(get_role_repository)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    Args:
        session: Registry session for transaction management
        user_repository: Repository for user persistence
        role_repository: Repository for role grants
        probe: User service probe for observability

    Returns:
        UserService instance
    """
    return UserService(
        session=session,
        user_repository=user_repository,
        role_repository=role_repository,
        probe=probe,
    )


async def _verify(
    credentials: HTTPAuthorizationCredentials | None,
    verifier: IdentityVerifier,
) -> Principal | None:
    if credentials is None or not credentials.credentials:
        return None
    return await verifier.verify(credentials.credentials)


async def get_current_user(
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> CurrentUser:
    """Resolve the authenticated user, creating them on first sight.

    Raises:
        HTTPException 401: If the bearer token is missing or not accepted
        HTTPException 403: If the user is banned
    """
    principal = await _verify(credentials, verifier)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await user_service.ensure_user(principal)
    except UserBannedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is banned",
        ) from e


async def get_optional_user(
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> CurrentUser | None:
    """Like ``get_current_user`` but anonymous instead of failing.

    A missing or rejected token, or a banned user, yields None.
    """
    principal = await _verify(credentials, verifier)
    if principal is None:
        return None
    try:
        return await user_service.ensure_user(principal)
    except UserBannedError:
        return None
