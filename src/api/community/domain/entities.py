"""Course content entities.

These are plain data carriers returned by the content repository. Author
and user references are registry user ids; nothing in a course database
enforces that they exist.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from community.domain.value_objects import (
    LifecycleState,
    PostKind,
    ReactionAction,
    ReactionKind,
    TargetKind,
)


@dataclass(frozen=True)
class Post:
    """A post, assignment or announcement in a course."""

    id: str
    course_id: str
    title: str
    content: str
    kind: PostKind
    author_id: str
    deadline: datetime | None
    media_urls: list[str]
    pinned: bool
    state: LifecycleState
    created_at: datetime
    updated_at: datetime

    @property
    def is_assignment(self) -> bool:
        return self.kind == PostKind.ASSIGNMENT


@dataclass(frozen=True)
class NewPost:
    """Input for creating a post."""

    title: str
    content: str
    kind: PostKind
    author_id: str
    deadline: datetime | None = None
    media_urls: list[str] = field(default_factory=list)
    pinned: bool = False


@dataclass(frozen=True)
class PostUpdate:
    """Partial update of a post. ``None`` fields are left unchanged.

    ``clear_deadline`` removes an existing deadline, since ``deadline=None``
    means "unchanged".
    """

    title: str | None = None
    content: str | None = None
    kind: PostKind | None = None
    deadline: datetime | None = None
    clear_deadline: bool = False
    media_urls: list[str] | None = None
    pinned: bool | None = None


@dataclass(frozen=True)
class Comment:
    """A comment on a post, optionally replying to another comment."""

    id: str
    course_id: str
    post_id: str
    author_id: str
    content: str
    parent_id: str | None
    state: LifecycleState
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class NewComment:
    """Input for creating a comment."""

    post_id: str
    author_id: str
    content: str
    parent_id: str | None = None


@dataclass(frozen=True)
class Reaction:
    """A user's reaction to a post or comment."""

    id: str
    course_id: str
    target_id: str
    target_kind: TargetKind
    user_id: str
    kind: ReactionKind
    created_at: datetime


@dataclass(frozen=True)
class ReactionToggle:
    """Result of toggling a reaction.

    ``reaction`` is the stored reaction after the toggle, or None when the
    toggle removed it.
    """

    action: ReactionAction
    reaction: Reaction | None


@dataclass(frozen=True)
class AssignmentStatus:
    """A user's completion record for one assignment."""

    id: str
    course_id: str
    post_id: str
    user_id: str
    completed: bool
    completed_at: datetime | None
    submission_note: str | None
    updated_at: datetime


@dataclass(frozen=True)
class UserStats:
    """Per-course activity counters for one user."""

    course_id: str
    user_id: str
    posts_count: int = 0
    comments_count: int = 0
    reactions_received: int = 0
    assignments_completed: int = 0
    points: int = 0

    @property
    def contributions(self) -> int:
        """Posts plus comments."""
        return self.posts_count + self.comments_count
