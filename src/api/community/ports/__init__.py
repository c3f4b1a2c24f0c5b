"""Ports (interfaces) for the community bounded context."""

from community.ports.repositories import ICourseContentRepository

__all__ = [
    "ICourseContentRepository",
]
