"""Repository port for course content.

Every operation takes the course id first. None of them raise when the
course database is unavailable: reads degrade to an empty list or None,
writes return the ``TenantUnavailable`` value so a lost write is never
mistaken for an empty result.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from community.domain import (
    AssignmentStatus,
    Comment,
    NewComment,
    NewPost,
    Post,
    PostKind,
    PostUpdate,
    Reaction,
    ReactionKind,
    ReactionToggle,
    TargetKind,
    UserStats,
)
from tenancy.domain import TenantUnavailable


@runtime_checkable
class ICourseContentRepository(Protocol):
    """Course-scoped content persistence."""

    async def create_post(
        self, course_id: str, new_post: NewPost
    ) -> Post | TenantUnavailable:
        """Create a post in the course database."""
        ...

    async def get_posts(
        self,
        course_id: str,
        limit: int | None = None,
        kind: PostKind | None = None,
    ) -> list[Post]:
        """List active posts, oldest first."""
        ...

    async def get_post_by_id(self, course_id: str, post_id: str) -> Post | None:
        """Fetch an active post. Deleted posts are not returned."""
        ...

    async def update_post(
        self, course_id: str, post_id: str, update: PostUpdate
    ) -> Post | None | TenantUnavailable:
        """Apply a partial update. None when the post does not exist."""
        ...

    async def soft_delete_post(
        self, course_id: str, post_id: str
    ) -> bool | TenantUnavailable:
        """Mark a post deleted. False when the post does not exist."""
        ...

    async def create_comment(
        self, course_id: str, new_comment: NewComment
    ) -> Comment | None | TenantUnavailable:
        """Create a comment. None when the post does not exist."""
        ...

    async def get_comments(
        self, course_id: str, post_id: str, limit: int | None = None
    ) -> list[Comment]:
        """List active comments on a post, oldest first."""
        ...

    async def get_comment_by_id(
        self, course_id: str, comment_id: str
    ) -> Comment | None:
        """Fetch an active comment; deleted comments are not returned."""
        ...

    async def update_comment(
        self, course_id: str, comment_id: str, content: str
    ) -> Comment | None | TenantUnavailable:
        """Replace a comment's content. None when the comment does not exist."""
        ...

    async def soft_delete_comment(
        self, course_id: str, comment_id: str
    ) -> bool | TenantUnavailable:
        """Mark a comment deleted. False when the comment does not exist."""
        ...

    async def get_reactions(
        self, course_id: str, target_id: str, target_kind: TargetKind
    ) -> list[Reaction]:
        """List reactions on a post or comment."""
        ...

    async def toggle_reaction(
        self,
        course_id: str,
        target_id: str,
        target_kind: TargetKind,
        user_id: str,
        kind: ReactionKind,
    ) -> ReactionToggle | TenantUnavailable:
        """Add, change or remove the user's reaction on a target."""
        ...

    async def delete_reaction(
        self, course_id: str, reaction_id: str
    ) -> bool | TenantUnavailable:
        """Remove a reaction by id. False when it does not exist."""
        ...

    async def get_assignment_status(
        self, course_id: str, post_id: str, user_id: str
    ) -> AssignmentStatus | None:
        """Fetch a user's completion record for an assignment."""
        ...

    async def get_user_assignment_statuses(
        self, course_id: str, user_id: str
    ) -> list[AssignmentStatus]:
        """List every completion record a user has in the course."""
        ...

    async def set_assignment_completion(
        self,
        course_id: str,
        post_id: str,
        user_id: str,
        completed: bool,
        submission_note: str | None = None,
    ) -> AssignmentStatus | None | TenantUnavailable:
        """Record (or clear) a user's completion of an assignment.

        None when the post is not an active assignment.
        """
        ...

    async def get_user_stats(self, course_id: str, user_id: str) -> UserStats | None:
        """Fetch a user's activity counters for the course."""
        ...

    async def get_course_leaderboard(
        self, course_id: str, limit: int = 10
    ) -> list[UserStats]:
        """List the course's top users by points, highest first."""
        ...
