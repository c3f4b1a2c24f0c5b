"""Result values describing why a course database could not be used."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class UnavailableReason(StrEnum):
    """Why a course database handle could not be produced or used."""

    NOT_CONFIGURED = "not_configured"
    STORE_UNAVAILABLE = "store_unavailable"
    UNREACHABLE = "unreachable"
    QUERY_FAILED = "query_failed"


@dataclass(frozen=True)
class TenantUnavailable:
    """Returned instead of a handle (or a write result) when a course database
    cannot be used.

    Instances are falsy so callers can write ``if not result:``.

    Attributes:
        course_id: The course whose database was requested
        reason: Why the database is unavailable
    """

    course_id: str
    reason: UnavailableReason

    def __bool__(self) -> bool:
        return False
