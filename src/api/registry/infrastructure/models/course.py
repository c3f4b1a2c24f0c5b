"""SQLAlchemy ORM model for the courses table.

Holds public course metadata only. Connection credentials are kept in
``course_credentials``, owned by the tenancy context.
"""

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class CourseModel(Base, TimestampMixin):
    """ORM model for courses table."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    lecturer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    course_rep: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CourseModel(id={self.id}, name={self.name})>"
