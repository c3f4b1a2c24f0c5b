"""Domain values for the tenancy bounded context."""

from tenancy.domain.credentials import CourseCredentials, PublicCourseCredentials
from tenancy.domain.results import TenantUnavailable, UnavailableReason

__all__ = [
    "CourseCredentials",
    "PublicCourseCredentials",
    "TenantUnavailable",
    "UnavailableReason",
]
