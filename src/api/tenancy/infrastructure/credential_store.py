"""Registry-backed credential store for course databases."""

from __future__ import annotations

from pydantic import SecretStr
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from ulid import ULID

from tenancy.domain.credentials import CourseCredentials
from tenancy.infrastructure.models import CourseCredentialsModel
from tenancy.infrastructure.observability import (
    CredentialStoreProbe,
    DefaultCredentialStoreProbe,
)
from tenancy.ports.exceptions import CredentialStoreUnavailableError
from tenancy.ports.protocols import ICredentialStore


class CredentialStore(ICredentialStore):
    """Persists course credentials in the registry's course_credentials table.

    The store is process-scoped (it backs the router), so it opens a fresh
    registry session per call unless the caller passes one in to make the
    write part of a larger transaction (course creation).

    Registry failures surface as ``CredentialStoreUnavailableError``; they
    are never swallowed here.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        probe: CredentialStoreProbe | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            sessionmaker: Registry sessionmaker
            probe: Optional domain probe for observability
        """
        self._sessionmaker = sessionmaker
        self._probe = probe or DefaultCredentialStoreProbe()

    async def put(
        self,
        course_id: str,
        credentials: CourseCredentials,
        session: AsyncSession | None = None,
    ) -> None:
        """Insert or replace the credentials for a course.

        Raises:
            CredentialStoreUnavailableError: If the registry write fails
        """
        try:
            if session is not None:
                created = await self._upsert(session, course_id, credentials)
                await session.flush()
            else:
                async with self._sessionmaker() as own_session:
                    async with own_session.begin():
                        created = await self._upsert(own_session, course_id, credentials)
        except SQLAlchemyError as e:
            self._probe.store_unavailable(course_id, "put", str(e))
            raise CredentialStoreUnavailableError(
                f"Failed to store credentials for course {course_id}"
            ) from e

        self._probe.credentials_saved(course_id, credentials.endpoint, created)

    async def get(self, course_id: str) -> CourseCredentials | None:
        """Look up the credentials for a course.

        Raises:
            CredentialStoreUnavailableError: If the registry read fails
        """
        try:
            async with self._sessionmaker() as session:
                model = await self._find(session, course_id)
        except SQLAlchemyError as e:
            self._probe.store_unavailable(course_id, "get", str(e))
            raise CredentialStoreUnavailableError(
                f"Failed to read credentials for course {course_id}"
            ) from e

        if model is None:
            return None

        return CourseCredentials(
            endpoint=model.endpoint,
            public_key=model.public_key,
            service_key=SecretStr(model.service_key),
        )

    async def _upsert(
        self,
        session: AsyncSession,
        course_id: str,
        credentials: CourseCredentials,
    ) -> bool:
        """Write the row, returning True when it was newly created."""
        model = await self._find(session, course_id)
        service_key = credentials.service_key.get_secret_value()

        if model is not None:
            model.endpoint = credentials.endpoint
            model.public_key = credentials.public_key
            model.service_key = service_key
            return False

        session.add(
            CourseCredentialsModel(
                id=str(ULID()),
                course_id=course_id,
                endpoint=credentials.endpoint,
                public_key=credentials.public_key,
                service_key=service_key,
            )
        )
        return True

    @staticmethod
    async def _find(
        session: AsyncSession, course_id: str
    ) -> CourseCredentialsModel | None:
        stmt = select(CourseCredentialsModel).where(
            CourseCredentialsModel.course_id == course_id
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
