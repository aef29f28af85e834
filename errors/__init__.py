"""Custom exception hierarchy for Classora Analytics."""

from errors.exceptions import AnalyticsError, EntityNotFoundError

__all__ = ["AnalyticsError", "EntityNotFoundError"]
