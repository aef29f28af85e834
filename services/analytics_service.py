"""Dashboard assembly — composes engine calls into student, class and teacher views.

This is the boundary between the pure engine and the serving layer:
settings are read here and passed down as explicit parameters, records are
scoped to the acting student, and each sub-computation runs in its own
scope so one failure empties that section instead of failing the request.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, TypeVar

from config.settings import Settings, get_settings
from errors.exceptions import EntityNotFoundError
from models.records import RecordSet
from models.stats import (
    AttendanceStat,
    ClassAttendanceOverview,
    OverallStats,
    QuizReport,
    SessionAttendance,
    StudentAnalytics,
    StudentDashboard,
    TeachingOverview,
)
from tools.activity_tools import merge_recent_activity, merge_upcoming_deadlines
from tools.attendance_tools import (
    compute_attendance_rate,
    compute_class_attendance_overview,
    compute_session_attendance,
    compute_subject_attendance_stats,
)
from tools.class_tools import compute_class_performance, compute_teaching_overview
from tools.completion_tools import (
    compute_assignment_grade_average,
    compute_completion_rate,
    count_assigned_items,
    count_completed_items,
    summarize_submissions,
)
from tools.quiz_tools import (
    compute_quiz_performance,
    compute_quiz_report,
    compute_quiz_stats,
    compute_subject_quiz_stats,
    group_attempts_by_class,
)
from tools.stats_tools import round_to, safe_mean

logger = logging.getLogger(__name__)

T = TypeVar("T")


def isolate_scope(scope: str, fn: Callable[[], T], default: T) -> T:
    """Run one aggregation scope; log and return ``default`` if it raises."""
    try:
        return fn()
    except Exception:
        logger.exception("Aggregation scope '%s' failed, returning empty result", scope)
        return default


def _enrolled_class_ids(records: RecordSet) -> list[str]:
    return list(dict.fromkeys(e.class_id for e in records.enrollments))


# ---------------------------------------------------------------------------
# Student views
# ---------------------------------------------------------------------------

def build_student_dashboard(
    student_id: str,
    records: RecordSet,
    now: datetime,
    settings: Settings | None = None,
) -> StudentDashboard:
    """Home-page summary: counts, best-score average and the two feeds."""
    settings = settings or get_settings()
    data = records.for_student(student_id)
    catalog = data.catalog
    class_ids = set(_enrolled_class_ids(data))

    assigned = count_assigned_items(data.enrollments, catalog.classes)
    completed = count_completed_items(data.attempts, data.submissions)
    quiz_stats = isolate_scope(
        "quiz_stats",
        lambda: compute_quiz_stats(data.attempts, settings.summary_precision),
        compute_quiz_stats([]),
    )

    recent_activity = isolate_scope(
        "recent_activity",
        lambda: merge_recent_activity(
            data.attempts,
            data.submissions,
            catalog,
            now,
            limit=settings.recent_activity_limit,
        ),
        [],
    )
    deadlines = isolate_scope(
        "upcoming_deadlines",
        lambda: merge_upcoming_deadlines(
            [a for a in catalog.assignments if a.class_id in class_ids],
            [q for q in catalog.quizzes if q.class_id in class_ids],
            data.submissions,
            data.attempts,
            catalog,
            now,
            window_days=settings.upcoming_window_days,
            limit=settings.upcoming_limit,
        ),
        [],
    )

    logger.info(
        "Student dashboard: student=%s classes=%d attempts=%d submissions=%d",
        student_id, len(class_ids), len(data.attempts), len(data.submissions),
    )
    return StudentDashboard(
        student_id=student_id,
        enrolled_classes=len(class_ids),
        completed_quizzes=quiz_stats.completed_count,
        total_quizzes=assigned.quizzes,
        completed_assignments=completed.assignments,
        total_assignments=assigned.assignments,
        average_score=quiz_stats.average_score,
        completion_rate=compute_completion_rate(assigned, completed, settings.summary_precision),
        upcoming_deadlines=len(deadlines),
        recent_activity=recent_activity,
        upcoming_deadlines_list=deadlines,
    )


def build_student_analytics(
    student_id: str,
    records: RecordSet,
    settings: Settings | None = None,
) -> StudentAnalytics:
    """Full per-student report: per-quiz, per-subject and overall statistics."""
    settings = settings or get_settings()
    data = records.for_student(student_id)
    catalog = data.catalog
    class_ids = _enrolled_class_ids(data)

    quiz_performance = isolate_scope(
        "quiz_performance",
        lambda: compute_quiz_performance(data.attempts, catalog),
        [],
    )
    subject_quiz_stats = isolate_scope(
        "subject_quiz_stats",
        lambda: compute_subject_quiz_stats(
            group_attempts_by_class(data.attempts, catalog),
            catalog,
            settings.subject_precision,
        ),
        [],
    )
    subject_attendance_stats = isolate_scope(
        "subject_attendance_stats",
        lambda: compute_subject_attendance_stats(
            data.attendance_records,
            data.sessions,
            class_ids,
            catalog,
            settings.subject_precision,
        ),
        [],
    )
    submissions = isolate_scope(
        "assignment_submissions",
        lambda: summarize_submissions(data.submissions, catalog),
        [],
    )
    attendance = isolate_scope(
        "attendance",
        lambda: compute_attendance_rate(data.attendance_records, settings.summary_precision),
        AttendanceStat(),
    )
    completed = count_completed_items(data.attempts, data.submissions)
    completion_rate = isolate_scope(
        "completion_rate",
        lambda: compute_completion_rate(
            count_assigned_items(data.enrollments, catalog.classes),
            completed,
            settings.summary_precision,
        ),
        0,
    )

    overall = OverallStats(
        total_classes=len(class_ids),
        total_quizzes=completed.quizzes,
        total_assignments=completed.assignments,
        total_attendance_sessions=len(data.attendance_records),
        average_quiz_score=round_to(
            safe_mean(s.average_percentage for s in subject_quiz_stats),
            settings.summary_precision,
        ),
        average_assignment_grade=compute_assignment_grade_average(
            data.submissions, settings.summary_precision
        ),
        attendance_rate=attendance.attendance_rate,
        completion_rate=completion_rate,
    )

    logger.info(
        "Student analytics: student=%s subjects=%d quizzes=%d",
        student_id, len(subject_quiz_stats), len(quiz_performance),
    )
    return StudentAnalytics(
        student_id=student_id,
        class_ids=class_ids,
        quiz_performance=quiz_performance,
        subject_quiz_stats=subject_quiz_stats,
        subject_attendance_stats=subject_attendance_stats,
        assignment_submissions=submissions,
        overall_stats=overall,
    )


# ---------------------------------------------------------------------------
# Class & teacher views
# ---------------------------------------------------------------------------

def build_class_attendance(
    class_id: str,
    records: RecordSet,
    now: datetime,
    period_days: int | None = None,
    student_id: str | None = None,
    settings: Settings | None = None,
) -> ClassAttendanceOverview | SessionAttendance:
    """Attendance for sessions in the last ``period_days`` days.

    With ``student_id`` the result is that student's session-by-session
    view; otherwise the class overview.
    """
    settings = settings or get_settings()
    period_days = period_days if period_days is not None else settings.attendance_period_days
    cutoff = now - timedelta(days=period_days)
    sessions = [s for s in records.sessions if s.class_id == class_id and s.date >= cutoff]

    if student_id:
        return compute_session_attendance(
            student_id,
            sessions,
            records.attendance_records,
            settings.attendance_precision,
        )

    student_ids = [e.student_id for e in records.enrollments if e.class_id == class_id]
    return compute_class_attendance_overview(
        class_id,
        sessions,
        records.attendance_records,
        student_ids,
        settings.attendance_precision,
    )


def build_quiz_report(
    quiz_id: str,
    records: RecordSet,
    settings: Settings | None = None,
) -> QuizReport:
    """Teacher report for one quiz.

    Raises:
        EntityNotFoundError: ``quiz_id`` is not in the catalog.
    """
    settings = settings or get_settings()
    quiz = records.catalog.get_quiz(quiz_id)
    if quiz is None:
        raise EntityNotFoundError("quiz_report", quiz_id, "quiz")
    return compute_quiz_report(quiz, records.attempts, recent_limit=settings.recent_activity_limit)


def build_teaching_overview(
    records: RecordSet,
    now: datetime,
    settings: Settings | None = None,
) -> TeachingOverview:
    """Headline numbers plus per-class analytics; failing classes are left out."""
    settings = settings or get_settings()
    overview = compute_teaching_overview(
        records,
        now,
        active_window_days=settings.active_window_days,
        passing_score=settings.passing_score,
        precision=settings.subject_precision,
        summary_precision=settings.summary_precision,
    )

    class_analytics = []
    for class_info in records.catalog.classes:
        performance = isolate_scope(
            f"class_performance:{class_info.id}",
            lambda cid=class_info.id: compute_class_performance(
                cid,
                records,
                top_n=settings.top_performer_limit,
                precision=settings.subject_precision,
            ),
            None,
        )
        if performance is not None:
            class_analytics.append(performance)

    logger.info(
        "Teaching overview: classes=%d students=%d",
        overview.total_classes, overview.total_students,
    )
    return overview.model_copy(update={"class_analytics": class_analytics})
