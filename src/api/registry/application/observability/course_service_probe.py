"""Domain probe for course service operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class CourseServiceProbe(Protocol):
    """Domain probe for course catalogue and membership operations."""

    def course_created(self, course_id: str, name: str, actor_id: str) -> None:
        """Record that a course and its credentials were registered."""
        ...

    def course_schema_provisioned(self, course_id: str, success: bool) -> None:
        """Record the outcome of creating a new course's tenant tables."""
        ...

    def credentials_rotated(self, course_id: str, actor_id: str) -> None:
        """Record that a course's credentials were replaced."""
        ...

    def course_access_denied(self, course_id: str, user_id: str) -> None:
        """Record that a user was refused access to a course."""
        ...

    def member_added(self, course_id: str, user_id: str, role: str) -> None:
        """Record that a user joined a course."""
        ...

    def membership_status_changed(self, membership_id: str, status: str) -> None:
        """Record that a membership was suspended or reactivated."""
        ...

    def with_context(self, context: ObservationContext) -> CourseServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCourseServiceProbe:
    """Default implementation of CourseServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultCourseServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultCourseServiceProbe(logger=self._logger, context=context)

    def course_created(self, course_id: str, name: str, actor_id: str) -> None:
        self._logger.info(
            "course_created",
            course_id=course_id,
            name=name,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def course_schema_provisioned(self, course_id: str, success: bool) -> None:
        log = self._logger.info if success else self._logger.warning
        log(
            "course_schema_provisioned",
            course_id=course_id,
            success=success,
            **self._get_context_kwargs(),
        )

    def credentials_rotated(self, course_id: str, actor_id: str) -> None:
        self._logger.info(
            "course_credentials_rotated",
            course_id=course_id,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def course_access_denied(self, course_id: str, user_id: str) -> None:
        self._logger.info(
            "course_access_denied",
            course_id=course_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def member_added(self, course_id: str, user_id: str, role: str) -> None:
        self._logger.info(
            "course_member_added",
            course_id=course_id,
            user_id=user_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def membership_status_changed(self, membership_id: str, status: str) -> None:
        self._logger.info(
            "course_membership_status_changed",
            membership_id=membership_id,
            status=status,
            **self._get_context_kwargs(),
        )
