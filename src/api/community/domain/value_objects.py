"""Value objects for the community (course content) domain."""

from __future__ import annotations

from enum import StrEnum


class LifecycleState(StrEnum):
    """Lifecycle of a post or comment.

    Deleted content keeps its row and identifier but is hidden from every
    read path.
    """

    ACTIVE = "active"
    DELETED = "deleted"


class PostKind(StrEnum):
    """What a post is used for within a course."""

    ASSIGNMENT = "assignment"
    POST = "post"
    ANNOUNCEMENT = "announcement"


class TargetKind(StrEnum):
    """What a reaction is attached to."""

    POST = "post"
    COMMENT = "comment"


class ReactionKind(StrEnum):
    """The closed set of reactions a user can leave."""

    LIKE = "like"
    LOVE = "love"
    LAUGH = "laugh"


class ReactionAction(StrEnum):
    """Outcome of toggling a reaction."""

    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"
