"""Analytics endpoints — turn posted record bundles into dashboard statistics.

The data-access layer fetches and scopes the records; these routes only
aggregate and serialize (camelCase keys).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from models.request import AnalyticsRequest, AttendanceRequest
from models.stats import (
    ClassAttendanceOverview,
    QuizReport,
    SessionAttendance,
    StudentAnalytics,
    StudentDashboard,
    TeachingOverview,
)
from services.analytics_service import (
    build_class_attendance,
    build_quiz_report,
    build_student_analytics,
    build_student_dashboard,
    build_teaching_overview,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.post("/students/{student_id}/dashboard", response_model=StudentDashboard)
async def student_dashboard(student_id: str, req: AnalyticsRequest):
    """Counts, best-score average, recent activity and upcoming deadlines."""
    return build_student_dashboard(student_id, req.records, req.resolve_now())


@router.post("/students/{student_id}/report", response_model=StudentAnalytics)
async def student_report(student_id: str, req: AnalyticsRequest):
    """Per-quiz, per-subject and overall statistics for one student."""
    return build_student_analytics(student_id, req.records)


@router.post(
    "/classes/{class_id}/attendance",
    response_model=ClassAttendanceOverview | SessionAttendance,
)
async def class_attendance(class_id: str, req: AttendanceRequest):
    """Class attendance overview, or one student's sessions when ``studentId`` is set."""
    return build_class_attendance(
        class_id,
        req.records,
        req.resolve_now(),
        period_days=req.period_days,
        student_id=req.student_id,
    )


@router.post("/quizzes/{quiz_id}/report", response_model=QuizReport)
async def quiz_report(quiz_id: str, req: AnalyticsRequest):
    return build_quiz_report(quiz_id, req.records)


@router.post("/overview", response_model=TeachingOverview)
async def teaching_overview(req: AnalyticsRequest):
    """Headline numbers across every class in the bundle."""
    logger.debug("Overview requested for %d classes", len(req.records.catalog.classes))
    return build_teaching_overview(req.records, req.resolve_now())
