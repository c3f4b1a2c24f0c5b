"""Pydantic models for course and membership API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, SecretStr

from registry.domain import Course, CourseMembership, CourseRole, MembershipStatus
from tenancy.domain import CourseCredentials, PublicCourseCredentials


class CredentialsRequest(BaseModel):
    """Connection parameters of a course database."""

    endpoint: str = Field(..., min_length=1, description="Project URL")
    public_key: str = Field(..., min_length=1, description="Browser-safe key")
    service_key: SecretStr = Field(..., description="Privileged key")

    def to_domain(self) -> CourseCredentials:
        return CourseCredentials(
            endpoint=self.endpoint,
            public_key=self.public_key,
            service_key=self.service_key,
        )


class CreateCourseRequest(BaseModel):
    """Request model for registering a course and its database."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    lecturer: str | None = Field(None, max_length=255)
    course_rep: str | None = Field(None, max_length=255)
    credentials: CredentialsRequest


class UpdateCourseRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    lecturer: str | None = Field(None, max_length=255)
    course_rep: str | None = Field(None, max_length=255)
    is_active: bool | None = None


class CourseResponse(BaseModel):
    """Response model for a course. Credentials are never included."""

    id: str = Field(..., description="Course ID (ULID format)")
    name: str
    description: str | None
    lecturer: str | None
    course_rep: str | None
    is_active: bool
    created_by: str
    created_at: datetime

    @classmethod
    def from_domain(cls, course: Course) -> CourseResponse:
        return cls(
            id=course.id,
            name=course.name,
            description=course.description,
            lecturer=course.lecturer,
            course_rep=course.course_rep,
            is_active=course.is_active,
            created_by=course.created_by,
            created_at=course.created_at,
        )


class PublicCredentialsResponse(BaseModel):
    endpoint: str
    public_key: str

    @classmethod
    def from_domain(cls, credentials: PublicCourseCredentials) -> PublicCredentialsResponse:
        return cls(endpoint=credentials.endpoint, public_key=credentials.public_key)


class AddMemberRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    role: CourseRole = CourseRole.STUDENT


class UpdateMembershipRequest(BaseModel):
    status: MembershipStatus


class MembershipResponse(BaseModel):
    id: str
    user_id: str
    course_id: str
    role: CourseRole
    status: MembershipStatus
    joined_at: datetime

    @classmethod
    def from_domain(cls, membership: CourseMembership) -> MembershipResponse:
        return cls(
            id=membership.id,
            user_id=membership.user_id,
            course_id=membership.course_id,
            role=membership.role,
            status=membership.status,
            joined_at=membership.joined_at,
        )
