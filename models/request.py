"""API request models."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import Field

from models.base import CamelModel, UtcDatetime
from models.records import RecordSet


class AnalyticsRequest(CamelModel):
    """POST /api/analytics/* — request body.

    ``records`` holds everything the data layer fetched for the request;
    ``now`` pins the reference time (defaults to the current UTC time).
    Naive timestamps, here and in the records, are read as UTC.
    """

    records: RecordSet = Field(default_factory=RecordSet)
    now: UtcDatetime | None = None

    def resolve_now(self) -> datetime:
        return self.now or datetime.now(timezone.utc)


class AttendanceRequest(AnalyticsRequest):
    """POST /api/analytics/classes/{class_id}/attendance — request body."""

    period_days: int | None = Field(default=None, ge=0)
    student_id: str | None = None
