"""Integration tests for registry persistence and the credential store."""

import pytest
from pydantic import SecretStr

from registry.infrastructure.course_repository import CourseRepository
from registry.infrastructure.directory import RegistryDirectory
from registry.infrastructure.membership_repository import MembershipRepository
from registry.infrastructure.user_repository import UserRepository
from tenancy.domain import CourseCredentials
from tenancy.infrastructure.credential_store import CredentialStore

pytestmark = pytest.mark.integration


@pytest.fixture
def credentials() -> CourseCredentials:
    return CourseCredentials(
        endpoint="https://abcd.supabase.co",
        public_key="anon",
        service_key=SecretStr("secret"),
    )


class TestCourseRegistration:
    @pytest.mark.asyncio
    async def test_course_and_credentials_commit_together(
        self, registry_sessionmaker, credentials
    ):
        store = CredentialStore(registry_sessionmaker)

        async with registry_sessionmaker() as session:
            async with session.begin():
                creator = await UserRepository(session).add(
                    user_id="root", username="root", email="root@example.com"
                )
                course = await CourseRepository(session).add(
                    name="Algorithms", created_by=creator.id
                )
                await store.put(course.id, credentials, session=session)

        stored = await store.get(course.id)

        assert stored.endpoint == "https://abcd.supabase.co"
        assert stored.service_key.get_secret_value() == "secret"

    @pytest.mark.asyncio
    async def test_rolled_back_registration_leaves_no_credentials(
        self, registry_sessionmaker, credentials
    ):
        store = CredentialStore(registry_sessionmaker)
        course_id = None

        with pytest.raises(RuntimeError):
            async with registry_sessionmaker() as session:
                async with session.begin():
                    await UserRepository(session).add(
                        user_id="root", username="root", email="root@example.com"
                    )
                    course = await CourseRepository(session).add(
                        name="Algorithms", created_by="root"
                    )
                    course_id = course.id
                    await store.put(course.id, credentials, session=session)
                    raise RuntimeError("abort")

        assert await store.get(course_id) is None


class TestRegistryDirectory:
    @pytest.mark.asyncio
    async def test_reads_users_and_memberships(self, registry_sessionmaker):
        async with registry_sessionmaker() as session:
            async with session.begin():
                users = UserRepository(session)
                await users.add(user_id="root", username="root", email="r@x.io")
                await users.add(user_id="alice", username="alice", email="a@x.io")
                course = await CourseRepository(session).add(
                    name="Algorithms", created_by="root"
                )
                await MembershipRepository(session).add("alice", course.id)

        directory = RegistryDirectory(registry_sessionmaker)

        assert [u.id for u in await directory.list_users()] == ["root", "alice"]
        memberships = await directory.list_memberships("alice")
        assert [m.course_id for m in memberships] == [course.id]
        assert set(await directory.get_courses([course.id, "missing"])) == {course.id}
