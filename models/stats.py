"""Result structs produced by the aggregation engine.

Every aggregate is a named model keyed by stable ids (class id, quiz id)
rather than display strings, and serializes to camelCase for the API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from models.base import CamelModel

# Rounded at precision 0 these stay ints and serialize as 83, not 83.0
Percent = int | float


# ---------------------------------------------------------------------------
# Quizzes
# ---------------------------------------------------------------------------

class QuizStats(CamelModel):
    """Best-score rollup over a student's attempts."""
    completed_count: int = 0
    best_score_by_quiz: dict[str, float] = Field(default_factory=dict)
    average_score: Percent = 0


class QuizPerformance(CamelModel):
    """A student's best result on one quiz."""
    quiz_id: str
    quiz_title: str = ""
    class_id: str = ""
    class_name: str = ""
    class_code: str = ""
    score: float = 0
    max_score: float = 0
    attempts: int = 0
    last_attempt_date: datetime | None = None


class SubjectQuizStat(CamelModel):
    """Quiz rollup for one class (subject)."""
    class_id: str
    class_name: str = ""
    class_code: str = ""
    total_quizzes: int = 0
    total_attempts: int = 0
    total_score: float = 0
    total_max_score: float = 0
    # total_score / total_attempts, not per unique quiz
    average_score: float = 0
    average_percentage: float = 0


class QuestionStat(CamelModel):
    question_id: str
    correct_answers: int = 0
    total_answers: int = 0
    success_rate: float = 0


class AttemptSummary(CamelModel):
    id: str
    student_id: str
    score: float = 0
    time_spent: int = 0
    completed_at: datetime | None = None


class QuizReport(CamelModel):
    """Teacher-facing statistics for a single quiz."""
    quiz_id: str
    title: str = ""
    total_attempts: int = 0
    average_score: float = 0
    highest_score: float = 0
    lowest_score: float = 0
    completion_rate: float = 0
    average_time_spent: float = 0
    question_stats: list[QuestionStat] = Field(default_factory=list)
    recent_attempts: list[AttemptSummary] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------

class AttendanceStat(CamelModel):
    """Weighted attendance over a set of records."""
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    unrecognized: int = 0
    total: int = 0
    weighted_attendance: float = 0
    attendance_rate: Percent = 0


class SubjectAttendanceStat(AttendanceStat):
    class_id: str
    class_name: str = ""
    class_code: str = ""


class StudentAttendanceStat(AttendanceStat):
    student_id: str


class SessionStatus(CamelModel):
    session_id: str
    date: datetime
    title: str = ""
    status: str = "NOT_MARKED"
    marked_at: datetime | None = None


class SessionAttendance(CamelModel):
    """One student's attendance across a class's sessions."""
    student_id: str
    total_sessions: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    not_marked: int = 0
    attendance_rate: float = 0
    sessions: list[SessionStatus] = Field(default_factory=list)


class SessionBreakdown(CamelModel):
    session_id: str
    date: datetime
    title: str = ""
    total_records: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0


class ClassAttendanceOverview(CamelModel):
    """Class-wide attendance: per-student rates plus per-session counts."""
    class_id: str
    total_sessions: int = 0
    total_students: int = 0
    total_present: int = 0
    total_absent: int = 0
    total_late: int = 0
    total_excused: int = 0
    overall_attendance_rate: float = 0
    student_stats: list[StudentAttendanceStat] = Field(default_factory=list)
    sessions: list[SessionBreakdown] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Completion & submissions
# ---------------------------------------------------------------------------

class AssignedCounts(CamelModel):
    quizzes: int = 0
    assignments: int = 0

    @property
    def total(self) -> int:
        return self.quizzes + self.assignments


class CompletedCounts(CamelModel):
    quizzes: int = 0
    assignments: int = 0

    @property
    def total(self) -> int:
        return self.quizzes + self.assignments


class SubmissionSummary(CamelModel):
    assignment_id: str
    assignment_title: str = ""
    class_id: str = ""
    grade: float | None = None
    max_grade: float = 100
    submitted_at: datetime
    status: Literal["graded", "submitted"] = "submitted"


# ---------------------------------------------------------------------------
# Feeds
# ---------------------------------------------------------------------------

class ActivityItem(CamelModel):
    """An entry in the recent-activity feed."""
    id: str
    type: Literal["quiz", "assignment"]
    title: str = ""
    class_code: str = ""
    score: float | None = None
    occurred_at: datetime
    time: str  # relative label, e.g. "2 hours ago"


class DeadlineItem(CamelModel):
    """An entry in the upcoming-deadlines feed."""
    id: str
    type: Literal["quiz", "assignment"]
    title: str = ""
    class_code: str = ""
    due_at: datetime | None = None
    due_date: str  # label, e.g. "Tomorrow" or "Available now"
    completed: bool = False
    graded: bool | None = None
    assignment_id: str | None = None
    quiz_id: str | None = None


# ---------------------------------------------------------------------------
# Class & teaching overviews
# ---------------------------------------------------------------------------

class Performer(CamelModel):
    student_id: str
    value: float = 0
    count: int = 0


class ClassQuizBlock(CamelModel):
    total_quizzes: int = 0
    total_attempts: int = 0
    average_score: float = 0
    completion_rate: float = 0
    top_performers: list[Performer] = Field(default_factory=list)


class ClassAssignmentBlock(CamelModel):
    total_assignments: int = 0
    total_submissions: int = 0
    average_grade: float = 0
    completion_rate: float = 0
    top_performers: list[Performer] = Field(default_factory=list)


class ClassAttendanceBlock(CamelModel):
    total_sessions: int = 0
    average_attendance: float = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    excused_count: int = 0
    top_attendees: list[Performer] = Field(default_factory=list)


class ClassOverallBlock(CamelModel):
    average_grade: float = 0
    completion_rate: float = 0
    engagement_score: float = 0


class ClassPerformance(CamelModel):
    class_id: str
    class_name: str = ""
    class_code: str = ""
    student_count: int = 0
    quiz_performance: ClassQuizBlock = Field(default_factory=ClassQuizBlock)
    assignment_performance: ClassAssignmentBlock = Field(default_factory=ClassAssignmentBlock)
    attendance_performance: ClassAttendanceBlock = Field(default_factory=ClassAttendanceBlock)
    overall_performance: ClassOverallBlock = Field(default_factory=ClassOverallBlock)
    distribution: dict = Field(default_factory=dict)


class TeachingOverview(CamelModel):
    total_students: int = 0
    total_classes: int = 0
    average_grade: float = 0
    completion_rate: Percent = 0
    active_students: int = 0
    total_assignments: int = 0
    total_quizzes: int = 0
    total_notes: int = 0
    student_engagement: Percent = 0
    quiz_pass_rate: Percent = 0
    content_per_student: Percent = 0
    class_analytics: list[ClassPerformance] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Student dashboards
# ---------------------------------------------------------------------------

class OverallStats(CamelModel):
    total_classes: int = 0
    total_quizzes: int = 0
    total_assignments: int = 0
    total_attendance_sessions: int = 0
    average_quiz_score: Percent = 0
    average_assignment_grade: Percent = 0
    attendance_rate: Percent = 0
    completion_rate: Percent = 0


class StudentAnalytics(CamelModel):
    """Full per-student report across every enrolled class."""
    student_id: str
    class_ids: list[str] = Field(default_factory=list)
    quiz_performance: list[QuizPerformance] = Field(default_factory=list)
    subject_quiz_stats: list[SubjectQuizStat] = Field(default_factory=list)
    subject_attendance_stats: list[SubjectAttendanceStat] = Field(default_factory=list)
    assignment_submissions: list[SubmissionSummary] = Field(default_factory=list)
    overall_stats: OverallStats = Field(default_factory=OverallStats)


class StudentDashboard(CamelModel):
    """Home-page summary for a student."""
    student_id: str
    enrolled_classes: int = 0
    completed_quizzes: int = 0
    total_quizzes: int = 0
    completed_assignments: int = 0
    total_assignments: int = 0
    average_score: Percent = 0
    completion_rate: Percent = 0
    upcoming_deadlines: int = 0
    recent_activity: list[ActivityItem] = Field(default_factory=list)
    upcoming_deadlines_list: list[DeadlineItem] = Field(default_factory=list)
