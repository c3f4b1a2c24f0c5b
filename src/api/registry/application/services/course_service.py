"""Course application service for the registry bounded context.

Registers courses together with their database credentials, decides which
courses a user may see and manages memberships.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from registry.application.authorization import (
    can_manage_course,
    can_view_course,
    is_privileged,
)
from registry.application.observability import (
    CourseServiceProbe,
    DefaultCourseServiceProbe,
)
from registry.application.value_objects import CurrentUser
from registry.domain import Course, CourseMembership, CourseRole, MembershipStatus
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
from tenancy.domain import CourseCredentials, PublicCourseCredentials
from tenancy.ports import ICredentialStore


class CourseService:
    """Application service for courses and memberships."""

    def __init__(
        self,
        session: AsyncSession,
        course_repository: ICourseRepository,
        membership_repository: IMembershipRepository,
        user_repository: IUserRepository,
        credential_store: ICredentialStore,
        invalidator: ITenantHandleInvalidator,
        provisioner: ISchemaProvisioner | None = None,
        probe: CourseServiceProbe | None = None,
    ):
        """Initialize CourseService with dependencies.

        Args:
            session: Registry session for transaction management
            course_repository: Repository for the course catalogue
            membership_repository: Repository for course memberships
            user_repository: Repository used to check member targets exist
            credential_store: Store for course database credentials
            invalidator: Drops cached course handles after credential changes
            provisioner: Optional; creates tenant tables for new courses
            probe: Optional domain probe for observability
        """
        self._session = session
        self._courses = course_repository
        self._memberships = membership_repository
        self._users = user_repository
        self._credentials = credential_store
        self._invalidator = invalidator
        self._provisioner = provisioner
        self._probe = probe or DefaultCourseServiceProbe()

    async def create_course(
        self,
        actor: CurrentUser,
        name: str,
        credentials: CourseCredentials,
        description: str | None = None,
        lecturer: str | None = None,
        course_rep: str | None = None,
    ) -> Course:
        """Register a course and store its credentials in one transaction.

        When a provisioner is configured the tenant tables are created
        afterwards; a provisioning failure does not undo the registration.

        Raises:
            UnauthorizedError: If the actor is not privileged
        """
        if not is_privileged(actor):
            raise UnauthorizedError("Admin access required")

        async with self._session.begin():
            course = await self._courses.add(
                name=name,
                created_by=actor.id,
                description=description,
                lecturer=lecturer,
                course_rep=course_rep,
            )
            await self._credentials.put(course.id, credentials, session=self._session)

        self._probe.course_created(course_id=course.id, name=name, actor_id=actor.id)

        if self._provisioner is not None:
            provisioned = await self._provisioner.provision(course.id)
            self._probe.course_schema_provisioned(course.id, provisioned)

        return course

    async def list_visible_courses(self, actor: CurrentUser) -> list[Course]:
        """Privileged users see every active course; others see their own."""
        async with self._session.begin():
            if is_privileged(actor):
                return await self._courses.list_all()
            memberships = await self._memberships.list_for_user(actor.id)
            course_ids = [m.course_id for m in memberships if m.is_active]
            courses = await self._courses.get_many(course_ids)
        return [course for course in courses if course.is_active]

    async def get_course_for_user(self, actor: CurrentUser, course_id: str) -> Course:
        """Fetch a course the actor may view.

        Raises:
            CourseNotFoundError: If the course does not exist or is inactive
            UnauthorizedError: If the actor has no access to it
        """
        async with self._session.begin():
            course = await self._courses.get_by_id(course_id)
            if course is None or not course.is_active:
                raise CourseNotFoundError(f"Course {course_id} not found")
            membership = await self._memberships.get(actor.id, course_id)

        if not can_view_course(actor, course_id, membership):
            self._probe.course_access_denied(course_id, actor.id)
            raise UnauthorizedError(f"No access to course {course_id}")
        return course

    async def get_public_credentials(
        self, actor: CurrentUser, course_id: str
    ) -> PublicCourseCredentials:
        """Return the browser-safe connection parameters of a visible course."""
        await self.get_course_for_user(actor, course_id)
        credentials = await self._credentials.get(course_id)
        if credentials is None:
            raise CourseNotFoundError(f"Course {course_id} has no credentials")
        return credentials.public_view()

    async def update_course(
        self, actor: CurrentUser, course_id: str, **changes: object
    ) -> Course:
        if not can_manage_course(actor, course_id):
            raise UnauthorizedError(f"Cannot manage course {course_id}")
        async with self._session.begin():
            course = await self._courses.update(course_id, **changes)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def rotate_credentials(
        self, actor: CurrentUser, course_id: str, credentials: CourseCredentials
    ) -> None:
        """Replace a course's credentials and drop its cached handle.

        Requests already holding the old handle finish on it; the next
        resolution connects with the new credentials.
        """
        if not is_privileged(actor):
            raise UnauthorizedError("Admin access required")
        async with self._session.begin():
            course = await self._courses.get_by_id(course_id)
            if course is None:
                raise CourseNotFoundError(f"Course {course_id} not found")
            await self._credentials.put(course_id, credentials, session=self._session)

        await self._invalidator.invalidate(course_id)
        self._probe.credentials_rotated(course_id=course_id, actor_id=actor.id)

    async def add_member(
        self,
        actor: CurrentUser,
        course_id: str,
        user_id: str,
        role: CourseRole = CourseRole.STUDENT,
    ) -> CourseMembership:
        """Enrol a user in a course.

        Raises:
            UnauthorizedError: If the actor cannot manage the course
            CourseNotFoundError: If the course does not exist
            UserNotFoundError: If the user does not exist
            DuplicateMembershipError: If the user is already a member
        """
        if not can_manage_course(actor, course_id):
            raise UnauthorizedError(f"Cannot manage course {course_id}")

        async with self._session.begin():
            if await self._courses.get_by_id(course_id) is None:
                raise CourseNotFoundError(f"Course {course_id} not found")
            if await self._users.get_by_id(user_id) is None:
                raise UserNotFoundError(f"User {user_id} not found")
            if await self._memberships.get(user_id, course_id) is not None:
                raise DuplicateMembershipError(
                    f"User {user_id} is already a member of {course_id}"
                )
            membership = await self._memberships.add(user_id, course_id, role)

        self._probe.member_added(course_id=course_id, user_id=user_id, role=role.value)
        return membership

    async def list_members(
        self, actor: CurrentUser, course_id: str
    ) -> list[CourseMembership]:
        await self.get_course_for_user(actor, course_id)
        async with self._session.begin():
            return await self._memberships.list_for_course(course_id)

    async def list_my_memberships(self, actor: CurrentUser) -> list[CourseMembership]:
        async with self._session.begin():
            return await self._memberships.list_for_user(actor.id)

    async def set_membership_status(
        self, actor: CurrentUser, membership_id: str, status: MembershipStatus
    ) -> CourseMembership:
        """Suspend or reactivate a membership.

        Raises:
            MembershipNotFoundError: If the membership does not exist
            UnauthorizedError: If the actor cannot manage its course
        """
        async with self._session.begin():
            membership = await self._memberships.get_by_id(membership_id)
            if membership is None:
                raise MembershipNotFoundError(f"Membership {membership_id} not found")
            if not can_manage_course(actor, membership.course_id):
                raise UnauthorizedError(f"Cannot manage course {membership.course_id}")
            updated = await self._memberships.update_status(membership_id, status)

        if updated is None:
            raise MembershipNotFoundError(f"Membership {membership_id} not found")
        self._probe.membership_status_changed(membership_id, status.value)
        return updated
