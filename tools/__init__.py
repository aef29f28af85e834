"""Aggregation engine — pure functions over already-fetched records.

Nothing here performs I/O or reads the clock; callers pass ``now`` and the
rounding precision explicitly.
"""

from __future__ import annotations

from tools.activity_tools import (  # noqa: F401
    format_due_date,
    format_time_ago,
    merge_recent_activity,
    merge_upcoming_deadlines,
)
from tools.attendance_tools import (  # noqa: F401
    compute_attendance_rate,
    compute_class_attendance_overview,
    compute_session_attendance,
    compute_subject_attendance_stats,
)
from tools.class_tools import compute_class_performance, compute_teaching_overview  # noqa: F401
from tools.completion_tools import (  # noqa: F401
    compute_assignment_grade_average,
    compute_completion_rate,
    count_assigned_items,
    count_completed_items,
    summarize_submissions,
)
from tools.quiz_tools import (  # noqa: F401
    compute_quiz_performance,
    compute_quiz_report,
    compute_quiz_stats,
    compute_subject_quiz_stats,
    group_attempts_by_class,
)
