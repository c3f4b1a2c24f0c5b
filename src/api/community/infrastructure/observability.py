"""Domain probe for course content repository operations.

Captures the events that matter when content is read from or written to a
course database, most importantly when a course database cannot be used.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class ContentRepositoryProbe(Protocol):
    """Domain probe for course content persistence."""

    def tenant_unavailable(self, course_id: str, operation: str, reason: str) -> None:
        """Record that an operation was skipped because the course database
        could not be resolved."""
        ...

    def query_failed(self, course_id: str, operation: str, error: str) -> None:
        """Record that a query against a resolved course database failed."""
        ...

    def post_created(self, course_id: str, post_id: str, kind: str) -> None:
        """Record that a post was created."""
        ...

    def post_deleted(self, course_id: str, post_id: str) -> None:
        """Record that a post was soft-deleted."""
        ...

    def comment_created(self, course_id: str, comment_id: str, post_id: str) -> None:
        """Record that a comment was created."""
        ...

    def comment_deleted(self, course_id: str, comment_id: str) -> None:
        """Record that a comment was soft-deleted."""
        ...

    def reaction_toggled(
        self, course_id: str, target_id: str, user_id: str, action: str
    ) -> None:
        """Record the outcome of a reaction toggle."""
        ...

    def assignment_completion_set(
        self, course_id: str, post_id: str, user_id: str, completed: bool
    ) -> None:
        """Record that a user's completion of an assignment was recorded."""
        ...

    def with_context(self, context: ObservationContext) -> ContentRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultContentRepositoryProbe:
    """Default implementation of ContentRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultContentRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultContentRepositoryProbe(logger=self._logger, context=context)

    def tenant_unavailable(self, course_id: str, operation: str, reason: str) -> None:
        self._logger.warning(
            "course_content_unavailable",
            course_id=course_id,
            operation=operation,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def query_failed(self, course_id: str, operation: str, error: str) -> None:
        self._logger.error(
            "course_content_query_failed",
            course_id=course_id,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

    def post_created(self, course_id: str, post_id: str, kind: str) -> None:
        self._logger.info(
            "course_post_created",
            course_id=course_id,
            post_id=post_id,
            kind=kind,
            **self._get_context_kwargs(),
        )

    def post_deleted(self, course_id: str, post_id: str) -> None:
        self._logger.info(
            "course_post_deleted",
            course_id=course_id,
            post_id=post_id,
            **self._get_context_kwargs(),
        )

    def comment_created(self, course_id: str, comment_id: str, post_id: str) -> None:
        self._logger.info(
            "course_comment_created",
            course_id=course_id,
            comment_id=comment_id,
            post_id=post_id,
            **self._get_context_kwargs(),
        )

    def comment_deleted(self, course_id: str, comment_id: str) -> None:
        self._logger.info(
            "course_comment_deleted",
            course_id=course_id,
            comment_id=comment_id,
            **self._get_context_kwargs(),
        )

    def reaction_toggled(
        self, course_id: str, target_id: str, user_id: str, action: str
    ) -> None:
        self._logger.debug(
            "course_reaction_toggled",
            course_id=course_id,
            target_id=target_id,
            user_id=user_id,
            action=action,
            **self._get_context_kwargs(),
        )

    def assignment_completion_set(
        self, course_id: str, post_id: str, user_id: str, completed: bool
    ) -> None:
        self._logger.info(
            "assignment_completion_set",
            course_id=course_id,
            post_id=post_id,
            user_id=user_id,
            completed=completed,
            **self._get_context_kwargs(),
        )
