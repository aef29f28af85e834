"""Completion and grading rollups for assigned quizzes and assignments."""

from __future__ import annotations

from typing import Iterable

from models.records import AssignmentSubmission, Catalog, ClassInfo, Enrollment, QuizAttempt
from models.stats import AssignedCounts, CompletedCounts, SubmissionSummary
from tools.stats_tools import percentage, round_to, safe_mean

DEFAULT_MAX_GRADE = 100.0


def count_assigned_items(
    enrollments: Iterable[Enrollment],
    classes: Iterable[ClassInfo],
) -> AssignedCounts:
    """Quizzes and assignments that belong to the enrolled classes."""
    enrolled = {e.class_id for e in enrollments}
    quizzes = 0
    assignments = 0
    for class_info in classes:
        if class_info.id in enrolled:
            quizzes += class_info.quiz_count
            assignments += class_info.assignment_count
    return AssignedCounts(quizzes=quizzes, assignments=assignments)


def count_completed_items(
    attempts: Iterable[QuizAttempt],
    submissions: Iterable[AssignmentSubmission],
) -> CompletedCounts:
    """Distinct quizzes attempted and distinct assignments submitted."""
    return CompletedCounts(
        quizzes=len({a.quiz_id for a in attempts}),
        assignments=len({s.assignment_id for s in submissions}),
    )


def compute_completion_rate(
    assigned: AssignedCounts,
    completed: CompletedCounts,
    precision: int | None = None,
) -> float:
    """Completed items over assigned items, as a percentage.

    Returns 0 when nothing is assigned.
    """
    return round_to(percentage(completed.total, assigned.total), precision)


def grade_percentage(submission: AssignmentSubmission) -> float | None:
    """Grade as a percentage of ``max_grade`` (100 when unset); None if ungraded."""
    if submission.grade is None:
        return None
    return percentage(submission.grade, submission.max_grade or DEFAULT_MAX_GRADE)


def compute_assignment_grade_average(
    submissions: Iterable[AssignmentSubmission],
    precision: int | None = None,
) -> float:
    """Mean grade percentage over graded submissions (0 when none are graded)."""
    grades = [g for g in (grade_percentage(s) for s in submissions) if g is not None]
    return round_to(safe_mean(grades), precision)


def summarize_submissions(
    submissions: Iterable[AssignmentSubmission],
    catalog: Catalog,
) -> list[SubmissionSummary]:
    """Submission rows, newest first, labelled graded or submitted."""
    rows = []
    for submission in sorted(submissions, key=lambda s: s.submitted_at, reverse=True):
        assignment = catalog.get_assignment(submission.assignment_id)
        rows.append(SubmissionSummary(
            assignment_id=submission.assignment_id,
            assignment_title=assignment.title if assignment else "",
            class_id=assignment.class_id if assignment else "",
            grade=submission.grade,
            max_grade=submission.max_grade or DEFAULT_MAX_GRADE,
            submitted_at=submission.submitted_at,
            status="graded" if submission.grade is not None else "submitted",
        ))
    return rows
