"""Record builders shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from models.records import (
    AssignmentInfo,
    AssignmentSubmission,
    AttendanceRecord,
    AttendanceSession,
    Catalog,
    ClassInfo,
    Enrollment,
    QuizAnswer,
    QuizAttempt,
    QuizInfo,
    QuizQuestion,
    RecordSet,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_attempt(
    attempt_id: str,
    quiz_id: str,
    score: float | None,
    *,
    student_id: str = "s-1",
    started_at: datetime | None = None,
    completed: bool = True,
    correct: list[bool] | None = None,
    time_spent: int | None = None,
) -> QuizAttempt:
    started_at = started_at or NOW - timedelta(hours=1)
    answers = [
        QuizAnswer(question_id=f"{quiz_id}-q{i + 1}", is_correct=ok)
        for i, ok in enumerate(correct or [])
    ]
    return QuizAttempt(
        id=attempt_id,
        student_id=student_id,
        quiz_id=quiz_id,
        score=score,
        started_at=started_at,
        completed_at=started_at + timedelta(minutes=10) if completed else None,
        time_spent=time_spent,
        answers=answers,
    )


def make_submission(
    submission_id: str,
    assignment_id: str,
    grade: float | None = None,
    *,
    student_id: str = "s-1",
    max_grade: float | None = None,
    submitted_at: datetime | None = None,
) -> AssignmentSubmission:
    return AssignmentSubmission(
        id=submission_id,
        student_id=student_id,
        assignment_id=assignment_id,
        grade=grade,
        max_grade=max_grade,
        submitted_at=submitted_at or NOW - timedelta(hours=1),
    )


def make_record(session_id: str, status: str, student_id: str = "s-1") -> AttendanceRecord:
    return AttendanceRecord(student_id=student_id, session_id=session_id, status=status)


def make_quiz(quiz_id: str, class_id: str, points: list[float], **kwargs) -> QuizInfo:
    questions = [QuizQuestion(id=f"{quiz_id}-q{i + 1}", points=p) for i, p in enumerate(points)]
    return QuizInfo(id=quiz_id, class_id=class_id, title=kwargs.pop("title", quiz_id.upper()),
                    questions=questions, **kwargs)


def sample_record_set() -> RecordSet:
    """Two classes, two students, a spread of attempts, submissions and attendance.

    c-math (MATH101): quizzes q-alg (5 x 2 pts) and q-geo (2 x 5 pts),
    assignments a-essay (due in 3 days) and a-old (overdue).
    c-sci (SCI201): quiz q-bio (2 x 10 pts), assignment a-lab (due tomorrow).
    s-1 is enrolled in both classes, s-2 in c-math only.
    """
    catalog = Catalog(
        classes=[
            ClassInfo(id="c-math", name="Mathematics", code="MATH101",
                      quiz_count=2, assignment_count=2, note_count=3),
            ClassInfo(id="c-sci", name="Science", code="SCI201",
                      quiz_count=1, assignment_count=1),
        ],
        quizzes=[
            make_quiz("q-alg", "c-math", [2, 2, 2, 2, 2], title="Algebra"),
            make_quiz("q-geo", "c-math", [5, 5], title="Geometry"),
            make_quiz("q-bio", "c-sci", [10, 10], title="Cells"),
        ],
        assignments=[
            AssignmentInfo(id="a-essay", class_id="c-math", title="Essay",
                           due_date=NOW + timedelta(days=3)),
            AssignmentInfo(id="a-old", class_id="c-math", title="Old homework",
                           due_date=NOW - timedelta(days=2)),
            AssignmentInfo(id="a-lab", class_id="c-sci", title="Lab report",
                           due_date=NOW + timedelta(days=1)),
        ],
    )
    return RecordSet(
        catalog=catalog,
        enrollments=[
            Enrollment(student_id="s-1", class_id="c-math"),
            Enrollment(student_id="s-1", class_id="c-sci"),
            Enrollment(student_id="s-2", class_id="c-math"),
        ],
        attempts=[
            make_attempt("at-1", "q-alg", 6, started_at=NOW - timedelta(hours=2),
                         correct=[True, True, True, False, False], time_spent=600),
            make_attempt("at-2", "q-alg", 8, started_at=NOW - timedelta(hours=1),
                         correct=[True, True, True, True, False], time_spent=300),
            make_attempt("at-3", "q-geo", None, started_at=NOW - timedelta(days=3)),
            make_attempt("at-4", "q-bio", 25, started_at=NOW - timedelta(days=5)),
            make_attempt("at-5", "q-alg", 9, student_id="s-2",
                         started_at=NOW - timedelta(days=1), completed=False),
        ],
        submissions=[
            make_submission("sub-1", "a-old", 45, max_grade=50,
                            submitted_at=NOW - timedelta(days=4)),
            make_submission("sub-2", "a-lab", None, submitted_at=NOW - timedelta(minutes=30)),
            make_submission("sub-3", "a-essay", 80, student_id="s-2",
                            submitted_at=NOW - timedelta(days=2)),
        ],
        sessions=[
            AttendanceSession(id="se-1", class_id="c-math", date=NOW - timedelta(days=7), title="Week 1"),
            AttendanceSession(id="se-2", class_id="c-math", date=NOW - timedelta(days=2), title="Week 2"),
            AttendanceSession(id="se-3", class_id="c-sci", date=NOW - timedelta(days=1), title="Lab"),
            AttendanceSession(id="se-old", class_id="c-math", date=NOW - timedelta(days=60), title="Intro"),
        ],
        attendance_records=[
            make_record("se-1", "PRESENT"),
            make_record("se-2", "LATE"),
            make_record("se-3", "EXCUSED"),
            make_record("se-1", "ABSENT", student_id="s-2"),
            make_record("se-2", "PRESENT", student_id="s-2"),
            make_record("se-old", "PRESENT", student_id="s-2"),
        ],
    )
