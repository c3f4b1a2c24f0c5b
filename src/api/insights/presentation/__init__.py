"""Insights presentation layer."""

from insights.presentation.routes import router

__all__ = ["router"]
