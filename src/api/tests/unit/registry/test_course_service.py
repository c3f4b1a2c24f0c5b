"""Unit tests for CourseService."""

from unittest.mock import call, create_autospec

import pytest

from registry.application.observability import CourseServiceProbe
from registry.application.services import CourseService
from registry.domain import CourseRole, MembershipStatus, RoleKind
from registry.ports import (
    CourseNotFoundError,
    DuplicateMembershipError,
    ICourseRepository,
    IMembershipRepository,
    ISchemaProvisioner,
    ITenantHandleInvalidator,
    IUserRepository,
    MembershipNotFoundError,
    UnauthorizedError,
    UserNotFoundError,
)
from tenancy.ports import ICredentialStore


@pytest.fixture
def mock_course_repository():
    return create_autospec(ICourseRepository, instance=True)


@pytest.fixture
def mock_membership_repository():
    return create_autospec(IMembershipRepository, instance=True)


@pytest.fixture
def mock_user_repository():
    return create_autospec(IUserRepository, instance=True)


@pytest.fixture
def mock_credential_store():
    return create_autospec(ICredentialStore, instance=True)


@pytest.fixture
def mock_invalidator():
    return create_autospec(ITenantHandleInvalidator, instance=True)


@pytest.fixture
def mock_provisioner():
    return create_autospec(ISchemaProvisioner, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(CourseServiceProbe, instance=True)


@pytest.fixture
def course_service(
    mock_session,
    mock_course_repository,
    mock_membership_repository,
    mock_user_repository,
    mock_credential_store,
    mock_invalidator,
    mock_probe,
):
    return CourseService(
        session=mock_session,
        course_repository=mock_course_repository,
        membership_repository=mock_membership_repository,
        user_repository=mock_user_repository,
        credential_store=mock_credential_store,
        invalidator=mock_invalidator,
        probe=mock_probe,
    )


@pytest.fixture
def creator(current_user_factory):
    return current_user_factory("root", is_creator=True)


@pytest.fixture
def student(current_user_factory):
    return current_user_factory("student")


class TestCreateCourse:
    @pytest.mark.asyncio
    async def test_stores_course_and_credentials_in_one_transaction(
        self,
        course_service,
        mock_session,
        mock_course_repository,
        mock_credential_store,
        creator,
        credentials,
        course_factory,
    ):
        mock_course_repository.add.return_value = course_factory("course-1")

        course = await course_service.create_course(
            creator, "Algorithms", credentials, lecturer="Dr. Ada"
        )

        assert course.id == "course-1"
        mock_course_repository.add.assert_awaited_once_with(
            name="Algorithms",
            created_by="root",
            description=None,
            lecturer="Dr. Ada",
            course_rep=None,
        )
        mock_credential_store.put.assert_awaited_once_with(
            "course-1", credentials, session=mock_session
        )
        mock_session.begin.assert_called_once()

    @pytest.mark.asyncio
    async def test_student_cannot_create(
        self, course_service, mock_course_repository, student, credentials
    ):
        with pytest.raises(UnauthorizedError):
            await course_service.create_course(student, "Algorithms", credentials)

        mock_course_repository.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_provisions_schema_when_configured(
        self,
        mock_session,
        mock_course_repository,
        mock_membership_repository,
        mock_user_repository,
        mock_credential_store,
        mock_invalidator,
        mock_provisioner,
        mock_probe,
        creator,
        credentials,
        course_factory,
    ):
        mock_course_repository.add.return_value = course_factory("course-1")
        mock_provisioner.provision.return_value = False
        service = CourseService(
            session=mock_session,
            course_repository=mock_course_repository,
            membership_repository=mock_membership_repository,
            user_repository=mock_user_repository,
            credential_store=mock_credential_store,
            invalidator=mock_invalidator,
            provisioner=mock_provisioner,
            probe=mock_probe,
        )

        course = await service.create_course(creator, "Algorithms", credentials)

        assert course.id == "course-1"
        mock_provisioner.provision.assert_awaited_once_with("course-1")
        mock_probe.course_schema_provisioned.assert_called_once_with("course-1", False)


class TestVisibility:
    @pytest.mark.asyncio
    async def test_student_sees_active_courses_with_active_membership(
        self,
        course_service,
        mock_course_repository,
        mock_membership_repository,
        student,
        course_factory,
        membership_factory,
    ):
        mock_membership_repository.list_for_user.return_value = [
            membership_factory("student", "course-1"),
            membership_factory("student", "course-2", MembershipStatus.SUSPENDED),
            membership_factory("student", "course-3"),
        ]
        mock_course_repository.get_many.return_value = [
            course_factory("course-1"),
            course_factory("course-3", is_active=False),
        ]

        courses = await course_service.list_visible_courses(student)

        assert [c.id for c in courses] == ["course-1"]
        mock_course_repository.get_many.assert_awaited_once_with(
            ["course-1", "course-3"]
        )

    @pytest.mark.asyncio
    async def test_privileged_sees_catalogue(
        self, course_service, mock_course_repository, creator, course_factory
    ):
        mock_course_repository.list_all.return_value = [course_factory("course-1")]

        courses = await course_service.list_visible_courses(creator)

        assert len(courses) == 1
        mock_course_repository.list_all.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_inactive_course_is_not_found(
        self, course_service, mock_course_repository, creator, course_factory
    ):
        mock_course_repository.get_by_id.return_value = course_factory(
            "course-1", is_active=False
        )

        with pytest.raises(CourseNotFoundError):
            await course_service.get_course_for_user(creator, "course-1")

    @pytest.mark.asyncio
    async def test_non_member_is_denied(
        self,
        course_service,
        mock_course_repository,
        mock_membership_repository,
        mock_probe,
        student,
        course_factory,
    ):
        mock_course_repository.get_by_id.return_value = course_factory("course-1")
        mock_membership_repository.get.return_value = None

        with pytest.raises(UnauthorizedError):
            await course_service.get_course_for_user(student, "course-1")

        mock_probe.course_access_denied.assert_called_once_with("course-1", "student")

    @pytest.mark.asyncio
    async def test_public_credentials_omit_service_key(
        self,
        course_service,
        mock_course_repository,
        mock_credential_store,
        creator,
        credentials,
        course_factory,
    ):
        mock_course_repository.get_by_id.return_value = course_factory("course-1")
        mock_credential_store.get.return_value = credentials

        public = await course_service.get_public_credentials(creator, "course-1")

        assert public.endpoint == "https://abcd.supabase.co"
        assert public.public_key == "anon-key"
        assert not hasattr(public, "service_key")


class TestRotateCredentials:
    @pytest.mark.asyncio
    async def test_replaces_credentials_then_invalidates_handle(
        self,
        course_service,
        mock_session,
        mock_course_repository,
        mock_credential_store,
        mock_invalidator,
        creator,
        credentials,
        course_factory,
    ):
        mock_course_repository.get_by_id.return_value = course_factory("course-1")

        await course_service.rotate_credentials(creator, "course-1", credentials)

        mock_credential_store.put.assert_awaited_once_with(
            "course-1", credentials, session=mock_session
        )
        mock_invalidator.invalidate.assert_awaited_once_with("course-1")

    @pytest.mark.asyncio
    async def test_course_admin_cannot_rotate(
        self, course_service, mock_invalidator, current_user_factory, credentials
    ):
        actor = current_user_factory(roles=((RoleKind.COURSE_ADMIN, "course-1"),))

        with pytest.raises(UnauthorizedError):
            await course_service.rotate_credentials(actor, "course-1", credentials)

        mock_invalidator.invalidate.assert_not_awaited()


class TestMembership:
    @pytest.mark.asyncio
    async def test_course_admin_adds_member(
        self,
        course_service,
        mock_course_repository,
        mock_user_repository,
        mock_membership_repository,
        current_user_factory,
        course_factory,
        user_factory,
        membership_factory,
    ):
        actor = current_user_factory(roles=((RoleKind.COURSE_ADMIN, "course-1"),))
        mock_course_repository.get_by_id.return_value = course_factory("course-1")
        mock_user_repository.get_by_id.return_value = user_factory("user-2")
        mock_membership_repository.get.return_value = None
        mock_membership_repository.add.return_value = membership_factory(
            "user-2", "course-1"
        )

        membership = await course_service.add_member(actor, "course-1", "user-2")

        assert membership.user_id == "user-2"
        mock_membership_repository.add.assert_awaited_once_with(
            "user-2", "course-1", CourseRole.STUDENT
        )

    @pytest.mark.asyncio
    async def test_duplicate_membership(
        self,
        course_service,
        mock_course_repository,
        mock_user_repository,
        mock_membership_repository,
        creator,
        course_factory,
        user_factory,
        membership_factory,
    ):
        mock_course_repository.get_by_id.return_value = course_factory("course-1")
        mock_user_repository.get_by_id.return_value = user_factory("user-2")
        mock_membership_repository.get.return_value = membership_factory(
            "user-2", "course-1"
        )

        with pytest.raises(DuplicateMembershipError):
            await course_service.add_member(creator, "course-1", "user-2")

    @pytest.mark.asyncio
    async def test_unknown_user(
        self,
        course_service,
        mock_course_repository,
        mock_user_repository,
        creator,
        course_factory,
    ):
        mock_course_repository.get_by_id.return_value = course_factory("course-1")
        mock_user_repository.get_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            await course_service.add_member(creator, "course-1", "ghost")

    @pytest.mark.asyncio
    async def test_suspend_membership(
        self,
        course_service,
        mock_membership_repository,
        mock_probe,
        creator,
        membership_factory,
    ):
        mock_membership_repository.get_by_id.return_value = membership_factory(
            membership_id="m-1"
        )
        mock_membership_repository.update_status.return_value = membership_factory(
            status=MembershipStatus.SUSPENDED, membership_id="m-1"
        )

        updated = await course_service.set_membership_status(
            creator, "m-1", MembershipStatus.SUSPENDED
        )

        assert updated.status == MembershipStatus.SUSPENDED
        assert mock_probe.membership_status_changed.call_args == call(
            "m-1", "suspended"
        )

    @pytest.mark.asyncio
    async def test_missing_membership(
        self, course_service, mock_membership_repository, creator
    ):
        mock_membership_repository.get_by_id.return_value = None

        with pytest.raises(MembershipNotFoundError):
            await course_service.set_membership_status(
                creator, "m-9", MembershipStatus.ACTIVE
            )
