"""Pydantic models for course content API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from community.domain import (
    AssignmentStatus,
    Comment,
    LifecycleState,
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


class CreatePostRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    kind: PostKind = PostKind.POST
    deadline: datetime | None = Field(None, description="Due date for assignments")
    media_urls: list[str] = Field(default_factory=list)
    pinned: bool = False


class UpdatePostRequest(BaseModel):
    """Partial update. Omitted fields are unchanged; ``deadline: null``
    removes an existing deadline."""

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)
    kind: PostKind | None = None
    deadline: datetime | None = None
    media_urls: list[str] | None = None
    pinned: bool | None = None

    def to_domain(self) -> PostUpdate:
        clear_deadline = "deadline" in self.model_fields_set and self.deadline is None
        return PostUpdate(
            title=self.title,
            content=self.content,
            kind=self.kind,
            deadline=self.deadline,
            clear_deadline=clear_deadline,
            media_urls=self.media_urls,
            pinned=self.pinned,
        )


class PostResponse(BaseModel):
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

    @classmethod
    def from_domain(cls, post: Post) -> PostResponse:
        return cls(
            id=post.id,
            course_id=post.course_id,
            title=post.title,
            content=post.content,
            kind=post.kind,
            author_id=post.author_id,
            deadline=post.deadline,
            media_urls=list(post.media_urls),
            pinned=post.pinned,
            state=post.state,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class CreateCommentRequest(BaseModel):
    content: str = Field(..., min_length=1)
    parent_id: str | None = Field(None, description="Comment being replied to")


class UpdateCommentRequest(BaseModel):
    content: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    id: str
    course_id: str
    post_id: str
    author_id: str
    content: str
    parent_id: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, comment: Comment) -> CommentResponse:
        return cls(
            id=comment.id,
            course_id=comment.course_id,
            post_id=comment.post_id,
            author_id=comment.author_id,
            content=comment.content,
            parent_id=comment.parent_id,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class ToggleReactionRequest(BaseModel):
    target_id: str = Field(..., min_length=1)
    target_kind: TargetKind
    kind: ReactionKind = ReactionKind.LIKE


class ReactionResponse(BaseModel):
    id: str
    target_id: str
    target_kind: TargetKind
    user_id: str
    kind: ReactionKind
    created_at: datetime

    @classmethod
    def from_domain(cls, reaction: Reaction) -> ReactionResponse:
        return cls(
            id=reaction.id,
            target_id=reaction.target_id,
            target_kind=reaction.target_kind,
            user_id=reaction.user_id,
            kind=reaction.kind,
            created_at=reaction.created_at,
        )


class ReactionToggleResponse(BaseModel):
    action: ReactionAction
    reaction: ReactionResponse | None

    @classmethod
    def from_domain(cls, toggle: ReactionToggle) -> ReactionToggleResponse:
        return cls(
            action=toggle.action,
            reaction=(
                ReactionResponse.from_domain(toggle.reaction)
                if toggle.reaction is not None
                else None
            ),
        )


class CompleteAssignmentRequest(BaseModel):
    completed: bool = True
    submission_note: str | None = None


class AssignmentStatusResponse(BaseModel):
    post_id: str
    user_id: str
    completed: bool
    completed_at: datetime | None
    submission_note: str | None
    updated_at: datetime

    @classmethod
    def from_domain(cls, status: AssignmentStatus) -> AssignmentStatusResponse:
        return cls(
            post_id=status.post_id,
            user_id=status.user_id,
            completed=status.completed,
            completed_at=status.completed_at,
            submission_note=status.submission_note,
            updated_at=status.updated_at,
        )


class UserStatsResponse(BaseModel):
    user_id: str
    posts_count: int
    comments_count: int
    reactions_received: int
    assignments_completed: int
    points: int
    contributions: int

    @classmethod
    def from_domain(cls, stats: UserStats) -> UserStatsResponse:
        return cls(
            user_id=stats.user_id,
            posts_count=stats.posts_count,
            comments_count=stats.comments_count,
            reactions_received=stats.reactions_received,
            assignments_completed=stats.assignments_completed,
            points=stats.points,
            contributions=stats.contributions,
        )
