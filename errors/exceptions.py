"""Domain-specific exceptions for the analytics engine.

These let the service and API layers tell a failed aggregation scope apart
from programming errors, so one broken class or subject can be skipped while
the rest of a dashboard is still returned.
"""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for aggregation failures."""

    def __init__(self, scope: str, message: str) -> None:
        self.scope = scope
        super().__init__(f"Aggregation '{scope}' failed: {message}")


class EntityNotFoundError(AnalyticsError):
    """A record references a quiz, assignment or class missing from the catalog.

    Raised only where the missing entity is required to compute a value
    (e.g. a quiz's max score); cosmetic lookups such as titles fall back to
    empty strings instead.
    """

    def __init__(
        self,
        scope: str,
        entity_id: str,
        entity_type: str = "entity",
    ) -> None:
        self.entity_id = entity_id
        self.entity_type = entity_type
        super().__init__(scope, f"{entity_type} '{entity_id}' not found")
