"""Community presentation layer."""

from community.presentation.routes import router

__all__ = ["router"]
