"""Domain-Oriented Observability for the registry application layer."""

from registry.application.observability.course_service_probe import (
    CourseServiceProbe,
    DefaultCourseServiceProbe,
)
from registry.application.observability.settings_service_probe import (
    DefaultSettingsServiceProbe,
    SettingsServiceProbe,
)
from registry.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "CourseServiceProbe",
    "DefaultCourseServiceProbe",
    "DefaultSettingsServiceProbe",
    "DefaultUserServiceProbe",
    "SettingsServiceProbe",
    "UserServiceProbe",
]
