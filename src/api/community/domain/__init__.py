"""Domain layer for the community bounded context."""

from community.domain.entities import (
    AssignmentStatus,
    Comment,
    NewComment,
    NewPost,
    Post,
    PostUpdate,
    Reaction,
    ReactionToggle,
    UserStats,
)
from community.domain.value_objects import (
    LifecycleState,
    PostKind,
    ReactionAction,
    ReactionKind,
    TargetKind,
)

__all__ = [
    "AssignmentStatus",
    "Comment",
    "LifecycleState",
    "NewComment",
    "NewPost",
    "Post",
    "PostKind",
    "PostUpdate",
    "Reaction",
    "ReactionAction",
    "ReactionKind",
    "ReactionToggle",
    "TargetKind",
    "UserStats",
]
