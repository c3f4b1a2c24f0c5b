"""Course service dependencies for the registry context."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import (
    get_registry_session,
    get_registry_sessionmaker,
)
from registry.application.observability import (
    CourseServiceProbe,
    DefaultCourseServiceProbe,
)
from registry.application.services import CourseService
from registry.dependencies.user import get_user_repository
from registry.infrastructure.course_repository import CourseRepository
from registry.infrastructure.membership_repository import MembershipRepository
from registry.infrastructure.user_repository import UserRepository
from tenancy.application import CourseDatabaseRouter, TenantSchemaProvisioner
from tenancy.dependencies import get_tenant_router
from tenancy.infrastructure.credential_store import CredentialStore


def get_course_service_probe() -> CourseServiceProbe:
    return DefaultCourseServiceProbe()


def get_course_repository(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
) -> CourseRepository:
    return CourseRepository(session=session)


def get_membership_repository(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
) -> MembershipRepository:
    return MembershipRepository(session=session)


def get_credential_store() -> CredentialStore:
    return CredentialStore(get_registry_sessionmaker())


def get_schema_provisioner(request: Request) -> TenantSchemaProvisioner | None:
    """Return the process-scoped provisioner, if the lifespan built one."""
    return getattr(request.app.state, "schema_provisioner", None)


def get_course_service(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
    course_repository: Annotated[CourseRepository, Depends(get_course_repository)],
    membership_repository: Annotated[
        MembershipRepository, Depends(get_membership_repository)
    ],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    credential_store: Annotated[CredentialStore, Depends(get_credential_store)],
    router: Annotated[CourseDatabaseRouter, Depends(get_tenant_router)],
    provisioner: Annotated[
        TenantSchemaProvisioner | None, Depends(get_schema_provisioner)
    ],
    probe: Annotated[CourseServiceProbe, Depends(get_course_service_probe)],
) -> CourseService:
    """Get CourseService instance.

    The router doubles as the handle invalidator so rotated credentials take
    effect on the next resolution.
    """
    return CourseService(
        session=session,
        course_repository=course_repository,
        membership_repository=membership_repository,
        user_repository=user_repository,
        credential_store=credential_store,
        invalidator=router,
        provisioner=provisioner,
        probe=probe,
    )
