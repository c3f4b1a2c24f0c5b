"""SQLAlchemy ORM model for the roles table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, _utc_now


class RoleModel(Base):
    """ORM model for roles table.

    ``scope`` holds a course id for course_admin roles and is NULL for
    platform-wide roles.
    """

    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    scope: Mapped[str | None] = mapped_column(String(26), nullable=True)
    assigned_by: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<RoleModel(id={self.id}, user_id={self.user_id}, kind={self.kind})>"
