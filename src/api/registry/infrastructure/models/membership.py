"""SQLAlchemy ORM model for the course_memberships table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, _utc_now


class CourseMembershipModel(Base):
    """ORM model for course_memberships table (one row per user per course)."""

    __tablename__ = "course_memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_course_memberships_user_course"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="student")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<CourseMembershipModel(user_id={self.user_id}, "
            f"course_id={self.course_id}, status={self.status})>"
        )
