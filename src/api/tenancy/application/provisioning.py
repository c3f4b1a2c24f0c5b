"""Creation of the per-course table set on a course database."""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tenancy.application.observability import (
    DefaultTenantRouterProbe,
    TenantRouterProbe,
)
from tenancy.application.router import CourseDatabaseRouter


class TenantSchemaProvisioner:
    """Creates missing tenant tables on a freshly configured course database.

    The metadata is supplied by the caller so this context stays unaware of
    which tables make up a course database. ``create_all`` only issues
    CREATE for tables that do not exist yet, so provisioning is repeatable.
    """

    def __init__(
        self,
        router: CourseDatabaseRouter,
        metadata: MetaData,
        probe: TenantRouterProbe | None = None,
    ) -> None:
        self._router = router
        self._metadata = metadata
        self._probe = probe or DefaultTenantRouterProbe()

    async def provision(self, course_id: str) -> bool:
        """Create the tenant tables for a course.

        Returns:
            True if the schema is in place, False if the course database
            could not be used
        """
        handle = await self._router.resolve(course_id)
        if not handle:
            return False

        try:
            async with handle.session() as session:
                await session.run_sync(self._create_all)
                await session.commit()
        except SQLAlchemyError as e:
            self._probe.schema_provisioning_failed(course_id, str(e))
            return False

        self._probe.schema_provisioned(course_id, len(self._metadata.tables))
        return True

    def _create_all(self, session: Session) -> None:
        self._metadata.create_all(bind=session.connection())
