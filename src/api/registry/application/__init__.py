"""Application layer for the registry bounded context."""

from registry.application.value_objects import CurrentUser

__all__ = ["CurrentUser"]
