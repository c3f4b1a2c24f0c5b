"""Session-per-call registry reader for process-scoped consumers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from registry.domain import Course, CourseMembership, User
from registry.infrastructure.course_repository import CourseRepository
from registry.infrastructure.membership_repository import MembershipRepository
from registry.infrastructure.user_repository import UserRepository
from registry.ports.collaborators import IRegistryDirectory


class RegistryDirectory(IRegistryDirectory):
    """Reads users, memberships and courses through short-lived sessions.

    Used by the cross-course aggregator, which outlives any single request
    and therefore cannot hold a request session.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    async def list_users(self) -> list[User]:
        async with self._sessionmaker() as session:
            return await UserRepository(session).list_all()

    async def list_memberships(
        self, user_id: str | None = None
    ) -> list[CourseMembership]:
        async with self._sessionmaker() as session:
            repository = MembershipRepository(session)
            if user_id is None:
                return await repository.list_all()
            return await repository.list_for_user(user_id)

    async def get_courses(self, course_ids: list[str]) -> dict[str, Course]:
        async with self._sessionmaker() as session:
            courses = await CourseRepository(session).get_many(course_ids)
        return {course.id: course for course in courses}
