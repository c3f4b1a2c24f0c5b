"""SQLAlchemy ORM model for the course_credentials registry table.

Credentials live in the registry next to the course they belong to, but
only the tenancy context reads or writes them. The service key column is
never selected by any registry-facing query.
"""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class CourseCredentialsModel(Base, TimestampMixin):
    """ORM model for course_credentials table (one row per course)."""

    __tablename__ = "course_credentials"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    course_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    endpoint: Mapped[str] = mapped_column(Text, nullable=False)
    public_key: Mapped[str] = mapped_column(Text, nullable=False)
    service_key: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        """Return string representation (service key omitted)."""
        return f"<CourseCredentialsModel(course_id={self.course_id}, endpoint={self.endpoint})>"
