"""Registry presentation layer.

Routes are organized per aggregate (auth, courses, admin, settings,
content); each package holds its own routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from registry.presentation.admin.routes import router as admin_router
from registry.presentation.auth.routes import router as auth_router
from registry.presentation.content.routes import router as content_router
from registry.presentation.courses.routes import router as courses_router
from registry.presentation.settings.routes import router as settings_router

router = APIRouter()

router.include_router(auth_router)
router.include_router(courses_router)
router.include_router(admin_router)
router.include_router(settings_router)
router.include_router(content_router)

__all__ = ["router"]
