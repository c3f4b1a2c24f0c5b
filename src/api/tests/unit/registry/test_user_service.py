"""Unit tests for UserService."""

from unittest.mock import create_autospec

import pytest

from registry.application.observability import UserServiceProbe
from registry.application.services import UserService, derive_username
from registry.domain import RoleKind
from registry.ports import (
    CreatorProtectedError,
    DuplicateUsernameError,
    InvalidRoleAssignmentError,
    IRoleRepository,
    IUserRepository,
    RoleNotFoundError,
    UnauthorizedError,
    UserBannedError,
    UserNotFoundError,
)
from shared_kernel.auth import Principal


@pytest.fixture
def mock_user_repository():
    return create_autospec(IUserRepository, instance=True)


@pytest.fixture
def mock_role_repository():
    repo = create_autospec(IRoleRepository, instance=True)
    repo.list_for_user.return_value = []
    return repo


@pytest.fixture
def mock_probe():
    return create_autospec(UserServiceProbe, instance=True)


@pytest.fixture
def user_service(mock_session, mock_user_repository, mock_role_repository, mock_probe):
    return UserService(
        session=mock_session,
        user_repository=mock_user_repository,
        role_repository=mock_role_repository,
        probe=mock_probe,
    )


@pytest.fixture
def creator(current_user_factory):
    return current_user_factory("root", is_creator=True)


@pytest.fixture
def top_admin(current_user_factory):
    return current_user_factory("admin", roles=((RoleKind.TOP_ADMIN, None),))


class TestDeriveUsername:
    def test_prefers_username_hint(self):
        principal = Principal(id="abc", email="x@example.com", username_hint="alice")

        assert derive_username(principal) == "alice"

    def test_falls_back_to_email_local_part(self):
        principal = Principal(id="abc", email="bob.smith+tag@example.com")

        assert derive_username(principal) == "bob.smithtag"

    def test_empty_candidate_becomes_user(self):
        principal = Principal(id="abc", email="")

        assert derive_username(principal) == "user"

    def test_long_candidate_is_truncated(self):
        principal = Principal(id="abc", email="", username_hint="a" * 80)

        assert derive_username(principal) == "a" * 40


class TestEnsureUser:
    @pytest.mark.asyncio
    async def test_creates_unknown_user_with_default_role(
        self,
        user_service,
        mock_user_repository,
        mock_role_repository,
        mock_probe,
        user_factory,
    ):
        principal = Principal(id="user-123456789", email="alice@example.com")
        mock_user_repository.get_by_id.return_value = None
        mock_user_repository.get_by_username.return_value = None
        mock_user_repository.add.return_value = user_factory(
            "user-123456789", username="alice"
        )

        current = await user_service.ensure_user(principal)

        assert current.id == "user-123456789"
        mock_user_repository.add.assert_awaited_once_with(
            user_id="user-123456789", username="alice", email="alice@example.com"
        )
        mock_role_repository.add.assert_awaited_once_with(
            user_id="user-123456789", kind=RoleKind.USER, assigned_by="user-123456789"
        )
        mock_probe.user_ensured.assert_called_once_with(
            user_id="user-123456789", username="alice", was_created=True
        )

    @pytest.mark.asyncio
    async def test_taken_username_gets_id_suffix(
        self, user_service, mock_user_repository, user_factory
    ):
        principal = Principal(id="user-123456789", email="alice@example.com")
        mock_user_repository.get_by_id.return_value = None
        mock_user_repository.get_by_username.return_value = user_factory("other")
        mock_user_repository.add.return_value = user_factory("user-123456789")

        await user_service.ensure_user(principal)

        assert (
            mock_user_repository.add.await_args.kwargs["username"] == "alice_user-123"
        )

    @pytest.mark.asyncio
    async def test_existing_user_is_returned_with_roles(
        self,
        user_service,
        mock_user_repository,
        mock_role_repository,
        user_factory,
        role_factory,
    ):
        existing = user_factory("user-1")
        mock_user_repository.get_by_id.return_value = existing
        roles = [role_factory("user-1", RoleKind.TOP_ADMIN)]
        mock_role_repository.list_for_user.return_value = roles

        current = await user_service.ensure_user(
            Principal(id="user-1", email="user-1@example.com")
        )

        assert current.user is existing
        assert current.roles == tuple(roles)
        mock_user_repository.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_banned_user_is_rejected(
        self, user_service, mock_user_repository, mock_probe, user_factory
    ):
        mock_user_repository.get_by_id.return_value = user_factory(
            "user-1", is_banned=True
        )

        with pytest.raises(UserBannedError):
            await user_service.ensure_user(Principal(id="user-1", email=""))

        mock_probe.banned_user_rejected.assert_called_once_with("user-1")

    @pytest.mark.asyncio
    async def test_repository_failure_is_reported_and_raised(
        self, user_service, mock_user_repository, mock_probe
    ):
        mock_user_repository.get_by_id.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            await user_service.ensure_user(Principal(id="user-1", email=""))

        mock_probe.user_provision_failed.assert_called_once_with(
            user_id="user-1", error="db down"
        )


class TestUpdateProfile:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", ["ab", "x" * 51, "  a  "])
    async def test_username_length_is_enforced(
        self, user_service, current_user_factory, username
    ):
        with pytest.raises(ValueError):
            await user_service.update_profile(current_user_factory(), username=username)

    @pytest.mark.asyncio
    async def test_taken_username_is_rejected(
        self, user_service, mock_user_repository, current_user_factory, user_factory
    ):
        mock_user_repository.get_by_username.return_value = user_factory("other")

        with pytest.raises(DuplicateUsernameError):
            await user_service.update_profile(
                current_user_factory("user-1"), username="taken"
            )

        mock_user_repository.update_profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_updates_own_profile(
        self, user_service, mock_user_repository, current_user_factory, user_factory
    ):
        mock_user_repository.get_by_username.return_value = None
        mock_user_repository.update_profile.return_value = user_factory(
            "user-1", username="newname"
        )

        updated = await user_service.update_profile(
            current_user_factory("user-1"), username="newname"
        )

        assert updated.username == "newname"
        mock_user_repository.update_profile.assert_awaited_once_with(
            "user-1", username="newname", email=None
        )


class TestBans:
    @pytest.mark.asyncio
    async def test_regular_user_cannot_ban(self, user_service, current_user_factory):
        with pytest.raises(UnauthorizedError):
            await user_service.set_banned(current_user_factory(), "user-2", True)

    @pytest.mark.asyncio
    async def test_creator_cannot_be_banned(
        self, user_service, mock_user_repository, top_admin, user_factory, mock_probe
    ):
        mock_user_repository.get_by_id.return_value = user_factory(
            "root", is_creator=True
        )

        with pytest.raises(CreatorProtectedError, match="Cannot ban the creator"):
            await user_service.set_banned(top_admin, "root", True)

        mock_user_repository.set_banned.assert_not_awaited()
        mock_probe.creator_protection_triggered.assert_called_once_with("root", "ban")

    @pytest.mark.asyncio
    async def test_unknown_user(self, user_service, mock_user_repository, top_admin):
        mock_user_repository.get_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            await user_service.set_banned(top_admin, "ghost", True)

    @pytest.mark.asyncio
    async def test_top_admin_bans_user(
        self, user_service, mock_user_repository, top_admin, user_factory
    ):
        mock_user_repository.get_by_id.return_value = user_factory("user-2")
        mock_user_repository.set_banned.return_value = user_factory(
            "user-2", is_banned=True
        )

        banned = await user_service.set_banned(top_admin, "user-2", True)

        assert banned.is_banned
        mock_user_repository.set_banned.assert_awaited_once_with("user-2", True)


class TestAssignRole:
    @pytest.mark.asyncio
    async def test_creator_role_cannot_be_granted(self, user_service, creator):
        with pytest.raises(CreatorProtectedError):
            await user_service.assign_role(creator, "user-2", RoleKind.CREATOR)

    @pytest.mark.asyncio
    async def test_creator_cannot_be_demoted(
        self, user_service, mock_user_repository, top_admin, user_factory
    ):
        mock_user_repository.get_by_id.return_value = user_factory(
            "root", is_creator=True
        )

        with pytest.raises(CreatorProtectedError, match="Cannot demote the creator"):
            await user_service.assign_role(top_admin, "root", RoleKind.USER)

    @pytest.mark.asyncio
    async def test_course_admin_requires_scope(self, user_service, creator):
        with pytest.raises(InvalidRoleAssignmentError):
            await user_service.assign_role(creator, "user-2", RoleKind.COURSE_ADMIN)

    @pytest.mark.asyncio
    async def test_top_admin_cannot_be_scoped(self, user_service, creator):
        with pytest.raises(InvalidRoleAssignmentError):
            await user_service.assign_role(
                creator, "user-2", RoleKind.TOP_ADMIN, scope="course-1"
            )

    @pytest.mark.asyncio
    async def test_course_admin_cannot_assign_roles(
        self, user_service, current_user_factory
    ):
        actor = current_user_factory(roles=((RoleKind.COURSE_ADMIN, "course-1"),))

        with pytest.raises(UnauthorizedError):
            await user_service.assign_role(
                actor, "user-2", RoleKind.COURSE_ADMIN, scope="course-1"
            )

    @pytest.mark.asyncio
    async def test_assigns_scoped_course_admin(
        self,
        user_service,
        mock_user_repository,
        mock_role_repository,
        creator,
        user_factory,
    ):
        mock_user_repository.get_by_id.return_value = user_factory("user-2")

        await user_service.assign_role(
            creator, "user-2", RoleKind.COURSE_ADMIN, scope="course-1"
        )

        mock_role_repository.add.assert_awaited_once_with(
            user_id="user-2",
            kind=RoleKind.COURSE_ADMIN,
            scope="course-1",
            assigned_by="root",
        )


class TestRevokeRole:
    @pytest.mark.asyncio
    async def test_missing_role(self, user_service, mock_role_repository, creator):
        mock_role_repository.get_by_id.return_value = None

        with pytest.raises(RoleNotFoundError):
            await user_service.revoke_role(creator, "role-9")

    @pytest.mark.asyncio
    async def test_creator_role_cannot_be_revoked(
        self, user_service, mock_role_repository, top_admin, role_factory
    ):
        mock_role_repository.get_by_id.return_value = role_factory(
            "root", RoleKind.CREATOR
        )

        with pytest.raises(CreatorProtectedError):
            await user_service.revoke_role(top_admin, "role-1")

        mock_role_repository.delete.assert_not_awaited()
