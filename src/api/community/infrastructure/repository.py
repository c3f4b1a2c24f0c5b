"""Course content repository.

Executes post, comment, reaction, assignment-status and stats operations
against whichever course database the router resolves. Each call opens its
own session on the shared course handle.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Awaitable, Callable, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from community.domain import (
    AssignmentStatus,
    Comment,
    LifecycleState,
    NewComment,
    NewPost,
    Post,
    PostKind,
    PostUpdate,
    Reaction,
    ReactionAction,
    ReactionKind,
    ReactionToggle,
    TargetKind,
    UserStats,
)
from community.infrastructure.models import (
    AssignmentStatusModel,
    CommentModel,
    PostModel,
    ReactionModel,
    UserStatsModel,
)
from community.infrastructure.observability import (
    ContentRepositoryProbe,
    DefaultContentRepositoryProbe,
)
from community.ports.repositories import ICourseContentRepository
from tenancy.application.router import CourseDatabaseRouter
from tenancy.domain import TenantUnavailable, UnavailableReason
from tenancy.ports import TenantHandle

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 50
DEFAULT_QUERY_TIMEOUT_SECONDS = 30.0

# asyncpg raises OSError subclasses on connection checkout; SQLAlchemy does
# not wrap them.
_COURSE_DATABASE_ERRORS = (SQLAlchemyError, OSError, TimeoutError)


class CourseContentRepository(ICourseContentRepository):
    """Course content persistence routed per course.

    Failure contract:
    - the course database cannot be resolved: reads return ``[]`` or None,
      writes return the router's ``TenantUnavailable``
    - a query fails on a resolved database (including the database going
      away after its handle was cached, or a unit of work exceeding the
      query timeout): reads degrade the same way, writes return
      ``TenantUnavailable`` with reason ``QUERY_FAILED``

    Posts and comments are never removed; deleting one moves it to
    ``LifecycleState.DELETED`` and every read path filters those out,
    including direct lookup by id.
    """

    def __init__(
        self,
        router: CourseDatabaseRouter,
        probe: ContentRepositoryProbe | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        query_timeout_seconds: float = DEFAULT_QUERY_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the repository.

        Args:
            router: Resolves course ids to database handles
            probe: Optional domain probe for observability
            page_size: List cap applied when the caller gives no limit
            query_timeout_seconds: Upper bound on each session of work
        """
        self._router = router
        self._probe = probe or DefaultContentRepositoryProbe()
        self._page_size = page_size
        self._query_timeout = query_timeout_seconds

    # Posts

    async def create_post(
        self, course_id: str, new_post: NewPost
    ) -> Post | TenantUnavailable:
        async def command(session: AsyncSession) -> Post:
            now = datetime.now(UTC)
            model = PostModel(
                id=str(ULID()),
                title=new_post.title,
                content=new_post.content,
                kind=new_post.kind.value,
                author_id=new_post.author_id,
                deadline=new_post.deadline,
                media_urls=list(new_post.media_urls),
                pinned=new_post.pinned,
                state=LifecycleState.ACTIVE.value,
                created_at=now,
                updated_at=now,
            )
            session.add(model)
            await session.flush()
            return self._to_post(course_id, model)

        result = await self._write(course_id, "create_post", command)
        if isinstance(result, Post):
            self._probe.post_created(course_id, result.id, result.kind.value)
        return result

    async def get_posts(
        self,
        course_id: str,
        limit: int | None = None,
        kind: PostKind | None = None,
    ) -> list[Post]:
        stmt = select(PostModel).where(PostModel.state == LifecycleState.ACTIVE.value)
        if kind is not None:
            stmt = stmt.where(PostModel.kind == kind.value)
        stmt = stmt.order_by(PostModel.created_at, PostModel.id).limit(
            self._limit(limit)
        )

        async def query(session: AsyncSession) -> list[Post]:
            result = await session.execute(stmt)
            return [self._to_post(course_id, m) for m in result.scalars().all()]

        return await self._read(course_id, "get_posts", query, [])

    async def get_post_by_id(self, course_id: str, post_id: str) -> Post | None:
        async def query(session: AsyncSession) -> Post | None:
            model = await self._find_active_post(session, post_id)
            return self._to_post(course_id, model) if model is not None else None

        return await self._read(course_id, "get_post_by_id", query, None)

    async def update_post(
        self, course_id: str, post_id: str, update: PostUpdate
    ) -> Post | None | TenantUnavailable:
        async def command(session: AsyncSession) -> Post | None:
            model = await self._find_active_post(session, post_id)
            if model is None:
                return None

            if update.title is not None:
                model.title = update.title
            if update.content is not None:
                model.content = update.content
            if update.kind is not None:
                model.kind = update.kind.value
            if update.clear_deadline:
                model.deadline = None
            elif update.deadline is not None:
                model.deadline = update.deadline
            if update.media_urls is not None:
                model.media_urls = list(update.media_urls)
            if update.pinned is not None:
                model.pinned = update.pinned
            model.updated_at = datetime.now(UTC)
            return self._to_post(course_id, model)

        return await self._write(course_id, "update_post", command)

    async def soft_delete_post(
        self, course_id: str, post_id: str
    ) -> bool | TenantUnavailable:
        async def command(session: AsyncSession) -> bool:
            model = await self._find_active_post(session, post_id)
            if model is None:
                return False
            model.state = LifecycleState.DELETED.value
            model.updated_at = datetime.now(UTC)
            return True

        result = await self._write(course_id, "soft_delete_post", command)
        if result is True:
            self._probe.post_deleted(course_id, post_id)
        return result

    # Comments

    async def create_comment(
        self, course_id: str, new_comment: NewComment
    ) -> Comment | None | TenantUnavailable:
        async def command(session: AsyncSession) -> Comment | None:
            if await self._find_active_post(session, new_comment.post_id) is None:
                return None

            now = datetime.now(UTC)
            model = CommentModel(
                id=str(ULID()),
                post_id=new_comment.post_id,
                author_id=new_comment.author_id,
                content=new_comment.content,
                parent_id=new_comment.parent_id,
                state=LifecycleState.ACTIVE.value,
                created_at=now,
                updated_at=now,
            )
            session.add(model)
            await session.flush()
            return self._to_comment(course_id, model)

        result = await self._write(course_id, "create_comment", command)
        if isinstance(result, Comment):
            self._probe.comment_created(course_id, result.id, result.post_id)
        return result

    async def get_comments(
        self, course_id: str, post_id: str, limit: int | None = None
    ) -> list[Comment]:
        stmt = (
            select(CommentModel)
            .where(
                CommentModel.post_id == post_id,
                CommentModel.state == LifecycleState.ACTIVE.value,
            )
            .order_by(CommentModel.created_at, CommentModel.id)
            .limit(self._limit(limit))
        )

        async def query(session: AsyncSession) -> list[Comment]:
            result = await session.execute(stmt)
            return [self._to_comment(course_id, m) for m in result.scalars().all()]

        return await self._read(course_id, "get_comments", query, [])

    async def get_comment_by_id(
        self, course_id: str, comment_id: str
    ) -> Comment | None:
        async def query(session: AsyncSession) -> Comment | None:
            model = await self._find_active_comment(session, comment_id)
            return self._to_comment(course_id, model) if model else None

        return await self._read(course_id, "get_comment_by_id", query, None)

    async def update_comment(
        self, course_id: str, comment_id: str, content: str
    ) -> Comment | None | TenantUnavailable:
        async def command(session: AsyncSession) -> Comment | None:
            model = await self._find_active_comment(session, comment_id)
            if model is None:
                return None
            model.content = content
            model.updated_at = datetime.now(UTC)
            return self._to_comment(course_id, model)

        return await self._write(course_id, "update_comment", command)

    async def soft_delete_comment(
        self, course_id: str, comment_id: str
    ) -> bool | TenantUnavailable:
        async def command(session: AsyncSession) -> bool:
            model = await self._find_active_comment(session, comment_id)
            if model is None:
                return False
            model.state = LifecycleState.DELETED.value
            model.updated_at = datetime.now(UTC)
            return True

        result = await self._write(course_id, "soft_delete_comment", command)
        if result is True:
            self._probe.comment_deleted(course_id, comment_id)
        return result

    # Reactions

    async def get_reactions(
        self, course_id: str, target_id: str, target_kind: TargetKind
    ) -> list[Reaction]:
        stmt = (
            select(ReactionModel)
            .where(
                ReactionModel.target_id == target_id,
                ReactionModel.target_kind == target_kind.value,
            )
            .order_by(ReactionModel.created_at, ReactionModel.id)
        )

        async def query(session: AsyncSession) -> list[Reaction]:
            result = await session.execute(stmt)
            return [self._to_reaction(course_id, m) for m in result.scalars().all()]

        return await self._read(course_id, "get_reactions", query, [])

    async def toggle_reaction(
        self,
        course_id: str,
        target_id: str,
        target_kind: TargetKind,
        user_id: str,
        kind: ReactionKind,
    ) -> ReactionToggle | TenantUnavailable:
        """Apply the one-reaction-per-user-per-target policy.

        No reaction yet: add one. Same kind again: remove it. Different
        kind: change the existing reaction in place.
        """

        async def command(session: AsyncSession) -> ReactionToggle:
            stmt = select(ReactionModel).where(
                ReactionModel.target_id == target_id,
                ReactionModel.target_kind == target_kind.value,
                ReactionModel.user_id == user_id,
            )
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()

            if model is None:
                model = ReactionModel(
                    id=str(ULID()),
                    target_id=target_id,
                    target_kind=target_kind.value,
                    user_id=user_id,
                    kind=kind.value,
                    created_at=datetime.now(UTC),
                )
                session.add(model)
                await session.flush()
                return ReactionToggle(
                    ReactionAction.ADDED, self._to_reaction(course_id, model)
                )

            if model.kind == kind.value:
                await session.delete(model)
                return ReactionToggle(ReactionAction.REMOVED, None)

            model.kind = kind.value
            return ReactionToggle(
                ReactionAction.CHANGED, self._to_reaction(course_id, model)
            )

        result = await self._write(course_id, "toggle_reaction", command)
        if isinstance(result, ReactionToggle):
            self._probe.reaction_toggled(
                course_id, target_id, user_id, result.action.value
            )
        return result

    async def delete_reaction(
        self, course_id: str, reaction_id: str
    ) -> bool | TenantUnavailable:
        async def command(session: AsyncSession) -> bool:
            stmt = select(ReactionModel).where(ReactionModel.id == reaction_id)
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            if model is None:
                return False
            await session.delete(model)
            return True

        return await self._write(course_id, "delete_reaction", command)

    # Assignment status

    async def get_assignment_status(
        self, course_id: str, post_id: str, user_id: str
    ) -> AssignmentStatus | None:
        async def query(session: AsyncSession) -> AssignmentStatus | None:
            model = await self._find_status(session, post_id, user_id)
            return self._to_status(course_id, model) if model is not None else None

        return await self._read(course_id, "get_assignment_status", query, None)

    async def get_user_assignment_statuses(
        self, course_id: str, user_id: str
    ) -> list[AssignmentStatus]:
        stmt = (
            select(AssignmentStatusModel)
            .where(AssignmentStatusModel.user_id == user_id)
            .order_by(AssignmentStatusModel.created_at, AssignmentStatusModel.id)
        )

        async def query(session: AsyncSession) -> list[AssignmentStatus]:
            result = await session.execute(stmt)
            return [self._to_status(course_id, m) for m in result.scalars().all()]

        return await self._read(course_id, "get_user_assignment_statuses", query, [])

    async def set_assignment_completion(
        self,
        course_id: str,
        post_id: str,
        user_id: str,
        completed: bool,
        submission_note: str | None = None,
    ) -> AssignmentStatus | None | TenantUnavailable:
        """Upsert the user's completion record.

        ``completed_at`` is stamped when the record first becomes completed
        and cleared when it is marked incomplete. A given submission note
        replaces the stored one; None keeps it.
        """

        async def command(session: AsyncSession) -> AssignmentStatus | None:
            post = await self._find_active_post(session, post_id)
            if post is None or post.kind != PostKind.ASSIGNMENT.value:
                return None

            now = datetime.now(UTC)
            model = await self._find_status(session, post_id, user_id)
            if model is None:
                model = AssignmentStatusModel(
                    id=str(ULID()),
                    post_id=post_id,
                    user_id=user_id,
                    completed=completed,
                    completed_at=now if completed else None,
                    submission_note=submission_note,
                    created_at=now,
                    updated_at=now,
                )
                session.add(model)
                await session.flush()
            else:
                if completed and not model.completed:
                    model.completed_at = now
                elif not completed:
                    model.completed_at = None
                model.completed = completed
                if submission_note is not None:
                    model.submission_note = submission_note
                model.updated_at = now
            return self._to_status(course_id, model)

        result = await self._write(course_id, "set_assignment_completion", command)
        if isinstance(result, AssignmentStatus):
            self._probe.assignment_completion_set(
                course_id, post_id, user_id, result.completed
            )
        return result

    # Stats

    async def get_user_stats(self, course_id: str, user_id: str) -> UserStats | None:
        stmt = select(UserStatsModel).where(UserStatsModel.user_id == user_id)

        async def query(session: AsyncSession) -> UserStats | None:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return self._to_stats(course_id, model) if model is not None else None

        return await self._read(course_id, "get_user_stats", query, None)

    async def get_course_leaderboard(
        self, course_id: str, limit: int = 10
    ) -> list[UserStats]:
        stmt = (
            select(UserStatsModel)
            .order_by(UserStatsModel.points.desc(), UserStatsModel.user_id)
            .limit(limit)
        )

        async def query(session: AsyncSession) -> list[UserStats]:
            result = await session.execute(stmt)
            return [self._to_stats(course_id, m) for m in result.scalars().all()]

        return await self._read(course_id, "get_course_leaderboard", query, [])

    # Plumbing

    async def _resolve(
        self, course_id: str, operation: str
    ) -> TenantHandle | TenantUnavailable:
        handle = await self._router.resolve(course_id)
        if isinstance(handle, TenantUnavailable):
            self._probe.tenant_unavailable(course_id, operation, handle.reason.value)
        return handle

    async def _read(
        self,
        course_id: str,
        operation: str,
        query: Callable[[AsyncSession], Awaitable[T]],
        default: T,
    ) -> T:
        handle = await self._resolve(course_id, operation)
        if isinstance(handle, TenantUnavailable):
            return default

        try:
            async with asyncio.timeout(self._query_timeout):
                async with handle.session() as session:
                    return await query(session)
        except _COURSE_DATABASE_ERRORS as e:
            self._probe.query_failed(course_id, operation, str(e) or type(e).__name__)
            return default

    async def _write(
        self,
        course_id: str,
        operation: str,
        command: Callable[[AsyncSession], Awaitable[T]],
    ) -> T | TenantUnavailable:
        handle = await self._resolve(course_id, operation)
        if isinstance(handle, TenantUnavailable):
            return handle

        try:
            async with asyncio.timeout(self._query_timeout):
                async with handle.session() as session:
                    async with session.begin():
                        return await command(session)
        except _COURSE_DATABASE_ERRORS as e:
            self._probe.query_failed(course_id, operation, str(e) or type(e).__name__)
            return TenantUnavailable(course_id, UnavailableReason.QUERY_FAILED)

    def _limit(self, limit: int | None) -> int:
        return limit if limit is not None else self._page_size

    @staticmethod
    async def _find_active_post(session: AsyncSession, post_id: str) -> PostModel | None:
        stmt = select(PostModel).where(
            PostModel.id == post_id,
            PostModel.state == LifecycleState.ACTIVE.value,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def _find_active_comment(
        session: AsyncSession, comment_id: str
    ) -> CommentModel | None:
        stmt = select(CommentModel).where(
            CommentModel.id == comment_id,
            CommentModel.state == LifecycleState.ACTIVE.value,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def _find_status(
        session: AsyncSession, post_id: str, user_id: str
    ) -> AssignmentStatusModel | None:
        stmt = select(AssignmentStatusModel).where(
            AssignmentStatusModel.post_id == post_id,
            AssignmentStatusModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_post(course_id: str, model: PostModel) -> Post:
        return Post(
            id=model.id,
            course_id=course_id,
            title=model.title,
            content=model.content,
            kind=PostKind(model.kind),
            author_id=model.author_id,
            deadline=model.deadline,
            media_urls=list(model.media_urls or []),
            pinned=model.pinned,
            state=LifecycleState(model.state),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_comment(course_id: str, model: CommentModel) -> Comment:
        return Comment(
            id=model.id,
            course_id=course_id,
            post_id=model.post_id,
            author_id=model.author_id,
            content=model.content,
            parent_id=model.parent_id,
            state=LifecycleState(model.state),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_reaction(course_id: str, model: ReactionModel) -> Reaction:
        return Reaction(
            id=model.id,
            course_id=course_id,
            target_id=model.target_id,
            target_kind=TargetKind(model.target_kind),
            user_id=model.user_id,
            kind=ReactionKind(model.kind),
            created_at=model.created_at,
        )

    @staticmethod
    def _to_status(course_id: str, model: AssignmentStatusModel) -> AssignmentStatus:
        return AssignmentStatus(
            id=model.id,
            course_id=course_id,
            post_id=model.post_id,
            user_id=model.user_id,
            completed=model.completed,
            completed_at=model.completed_at,
            submission_note=model.submission_note,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_stats(course_id: str, model: UserStatsModel) -> UserStats:
        return UserStats(
            course_id=course_id,
            user_id=model.user_id,
            posts_count=model.posts_count,
            comments_count=model.comments_count,
            reactions_received=model.reactions_received,
            assignments_completed=model.assignments_completed,
            points=model.points,
        )
