"""SQLAlchemy ORM models for registry-level content.

Notifications, platform-wide pinned posts and user badges.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin, _utc_now


class NotificationModel(Base):
    """ORM model for notifications table."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[str] = mapped_column(String(50), nullable=False)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<NotificationModel(id={self.id}, user_id={self.user_id})>"


class PinnedPostModel(Base, TimestampMixin):
    """ORM model for global_pinned_posts table."""

    __tablename__ = "global_pinned_posts"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<PinnedPostModel(id={self.id}, title={self.title})>"


class UserBadgeModel(Base):
    """ORM model for user_badges table.

    ``course_id`` is NULL for platform-wide badges.
    """

    __tablename__ = "user_badges"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    badge_type: Mapped[str] = mapped_column(String(50), nullable=False)
    badge_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    course_id: Mapped[str | None] = mapped_column(String(26), nullable=True)
    earned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserBadgeModel(user_id={self.user_id}, badge_type={self.badge_type})>"
