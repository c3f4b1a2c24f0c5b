"""SQLAlchemy ORM models for the tables of a course database.

Every course database carries this same table set, created from
``TenantBase.metadata``. User references are registry user ids stored as
plain strings; there is no foreign key across databases.
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import TenantBase, TimestampMixin, _utc_now


class PostModel(TenantBase, TimestampMixin):
    """ORM model for the posts table."""

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    author_id: Mapped[str] = mapped_column(String(255), nullable=False)
    deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    media_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    state: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active", index=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<PostModel(id={self.id}, kind={self.kind}, state={self.state})>"


class CommentModel(TenantBase, TimestampMixin):
    """ORM model for the comments table."""

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    post_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    parent_id: Mapped[str | None] = mapped_column(String(26), nullable=True)
    state: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CommentModel(id={self.id}, post_id={self.post_id})>"


class ReactionModel(TenantBase):
    """ORM model for the reactions table.

    One reaction per user per target: changing the reaction kind updates
    the existing row.
    """

    __tablename__ = "reactions"
    __table_args__ = (
        UniqueConstraint(
            "target_id", "target_kind", "user_id", name="uq_reactions_target_user"
        ),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    target_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    target_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ReactionModel(id={self.id}, target_id={self.target_id}, "
            f"kind={self.kind})>"
        )


class AssignmentStatusModel(TenantBase, TimestampMixin):
    """ORM model for the assignment_status table."""

    __tablename__ = "assignment_status"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_assignment_status_post_user"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    post_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    submission_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<AssignmentStatusModel(post_id={self.post_id}, user_id={self.user_id}, "
            f"completed={self.completed})>"
        )


class UserStatsModel(TenantBase):
    """ORM model for the user_stats table (course leaderboard source)."""

    __tablename__ = "user_stats"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    posts_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reactions_received: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assignments_completed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    last_active: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        onupdate=_utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserStatsModel(user_id={self.user_id}, points={self.points})>"
