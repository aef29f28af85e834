"""Tests for completion and grade rollups."""

from models.stats import AssignedCounts, CompletedCounts
from tests.factories import make_attempt, make_submission
from tools.completion_tools import (
    compute_assignment_grade_average,
    compute_completion_rate,
    count_assigned_items,
    count_completed_items,
    grade_percentage,
    summarize_submissions,
)


def test_completion_rate_no_assigned_items():
    """Nothing assigned yields 0, never a division error."""
    assert compute_completion_rate(AssignedCounts(), CompletedCounts()) == 0


def test_completion_rate():
    rate = compute_completion_rate(
        AssignedCounts(quizzes=4, assignments=2),
        CompletedCounts(quizzes=2, assignments=1),
    )
    assert rate == 50.0


def test_completion_rate_precision():
    assigned = AssignedCounts(quizzes=3, assignments=3)
    completed = CompletedCounts(quizzes=3, assignments=2)
    assert compute_completion_rate(assigned, completed, precision=0) == 83
    assert compute_completion_rate(assigned, completed, precision=2) == 83.33


def test_count_assigned_items_only_enrolled_classes(record_set):
    s2_enrollments = [e for e in record_set.enrollments if e.student_id == "s-2"]
    counts = count_assigned_items(s2_enrollments, record_set.catalog.classes)
    assert (counts.quizzes, counts.assignments) == (2, 2)


def test_count_completed_items_unique():
    attempts = [make_attempt("a1", "q1", 5), make_attempt("a2", "q1", 7), make_attempt("a3", "q2", 1)]
    submissions = [make_submission("s1", "as1"), make_submission("s2", "as1")]
    counts = count_completed_items(attempts, submissions)
    assert (counts.quizzes, counts.assignments) == (2, 1)


def test_grade_percentage_defaults_max_grade_to_100():
    assert grade_percentage(make_submission("s1", "as1", 72)) == 72.0
    assert grade_percentage(make_submission("s1", "as1", 18, max_grade=20)) == 90.0
    assert grade_percentage(make_submission("s1", "as1", None)) is None


def test_grade_average_skips_ungraded():
    submissions = [
        make_submission("s1", "as1", 45, max_grade=50),
        make_submission("s2", "as2", 70),
        make_submission("s3", "as3", None),
    ]
    assert compute_assignment_grade_average(submissions) == 80.0
    assert compute_assignment_grade_average([]) == 0


def test_summarize_submissions(record_set):
    s1 = [s for s in record_set.submissions if s.student_id == "s-1"]
    rows = summarize_submissions(s1, record_set.catalog)

    assert [r.assignment_id for r in rows] == ["a-lab", "a-old"]
    assert rows[0].status == "submitted"
    assert rows[0].max_grade == 100
    assert rows[1].status == "graded"
    assert rows[1].assignment_title == "Old homework"
