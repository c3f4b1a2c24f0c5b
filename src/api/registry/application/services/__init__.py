"""Application services for the registry bounded context."""

from registry.application.services.content_service import ContentService
from registry.application.services.course_service import CourseService
from registry.application.services.settings_service import (
    PUBLIC_SETTING_KEYS,
    SettingsService,
)
from registry.application.services.user_service import UserService, derive_username

__all__ = [
    "ContentService",
    "CourseService",
    "PUBLIC_SETTING_KEYS",
    "SettingsService",
    "UserService",
    "derive_username",
]
