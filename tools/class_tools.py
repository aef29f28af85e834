"""Class-level and teacher-level rollups.

These combine quiz, assignment and attendance records for every student in
a class (or every class a teacher runs). Quiz results always use the best
score per (student, quiz) pair.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta

from models.records import RecordSet
from models.stats import (
    ClassAssignmentBlock,
    ClassAttendanceBlock,
    ClassOverallBlock,
    ClassPerformance,
    ClassQuizBlock,
    Performer,
    TeachingOverview,
)
from tools.attendance_tools import compute_attendance_rate
from tools.completion_tools import grade_percentage
from tools.stats_tools import calculate_stats, percentage, round_to, safe_mean


def _best_by_student_and_quiz(attempts) -> dict[tuple[str, str], float]:
    best: dict[tuple[str, str], float] = {}
    for attempt in attempts:
        key = (attempt.student_id, attempt.quiz_id)
        best[key] = max(best.get(key, 0.0), float(attempt.score or 0))
    return best


def _top(performers: list[Performer], top_n: int) -> list[Performer]:
    return sorted(performers, key=lambda p: p.value, reverse=True)[:top_n]


def compute_class_performance(
    class_id: str,
    records: RecordSet,
    top_n: int = 5,
    precision: int | None = 2,
) -> ClassPerformance:
    """Quiz, assignment and attendance performance for one class.

    Completion rates compare the number of students with any activity of a
    kind against the enrolled count. Engagement is the share of the three
    activity kinds (quizzes, assignments, attendance) each enrolled student
    shows up in.
    """
    catalog = records.catalog
    class_info = catalog.get_class(class_id)
    enrolled = list(dict.fromkeys(e.student_id for e in records.enrollments if e.class_id == class_id))
    enrolled_count = len(enrolled)

    # Quizzes
    quiz_ids = {q.id for q in catalog.quizzes if q.class_id == class_id}
    attempts = [a for a in records.attempts if a.quiz_id in quiz_ids]
    best = _best_by_student_and_quiz(attempts)
    best_by_student: dict[str, list[float]] = defaultdict(list)
    attempts_by_student: dict[str, int] = defaultdict(int)
    for (student_id, _), score in best.items():
        best_by_student[student_id].append(score)
    for attempt in attempts:
        attempts_by_student[attempt.student_id] += 1

    quiz_block = ClassQuizBlock(
        total_quizzes=class_info.quiz_count if class_info else len(quiz_ids),
        total_attempts=len(attempts),
        average_score=round_to(safe_mean(best.values()), precision),
        completion_rate=round_to(percentage(len(best_by_student), enrolled_count), precision),
        top_performers=_top(
            [
                Performer(
                    student_id=sid,
                    value=round_to(safe_mean(scores), precision),
                    count=attempts_by_student[sid],
                )
                for sid, scores in best_by_student.items()
            ],
            top_n,
        ),
    )

    # Assignments
    assignment_ids = {a.id for a in catalog.assignments if a.class_id == class_id}
    submissions = [s for s in records.submissions if s.assignment_id in assignment_ids]
    grades_by_student: dict[str, list[float]] = defaultdict(list)
    submissions_by_student: dict[str, int] = defaultdict(int)
    for submission in submissions:
        submissions_by_student[submission.student_id] += 1
        grade = grade_percentage(submission)
        if grade is not None:
            grades_by_student[submission.student_id].append(grade)
    all_grades = [g for grades in grades_by_student.values() for g in grades]

    assignment_block = ClassAssignmentBlock(
        total_assignments=class_info.assignment_count if class_info else len(assignment_ids),
        total_submissions=len(submissions),
        average_grade=round_to(safe_mean(all_grades), precision),
        completion_rate=round_to(percentage(len(submissions_by_student), enrolled_count), precision),
        top_performers=_top(
            [
                Performer(
                    student_id=sid,
                    value=round_to(safe_mean(grades_by_student.get(sid, [])), precision),
                    count=count,
                )
                for sid, count in submissions_by_student.items()
            ],
            top_n,
        ),
    )

    # Attendance
    session_ids = {s.id for s in records.sessions if s.class_id == class_id}
    class_records = [r for r in records.attendance_records if r.session_id in session_ids]
    records_by_student = defaultdict(list)
    for record in class_records:
        records_by_student[record.student_id].append(record)
    overall_attendance = compute_attendance_rate(class_records, precision)
    attendee_stats = {
        sid: compute_attendance_rate(rs, precision) for sid, rs in records_by_student.items()
    }

    attendance_block = ClassAttendanceBlock(
        total_sessions=len(session_ids),
        average_attendance=overall_attendance.attendance_rate,
        present_count=overall_attendance.present,
        absent_count=overall_attendance.absent,
        late_count=overall_attendance.late,
        excused_count=overall_attendance.excused,
        top_attendees=_top(
            [
                Performer(student_id=sid, value=stat.attendance_rate, count=stat.present)
                for sid, stat in attendee_stats.items()
            ],
            top_n,
        ),
    )

    active_quiz = len(best_by_student)
    active_assignment = len(submissions_by_student)
    active_attendance = len(records_by_student)
    overall_block = ClassOverallBlock(
        average_grade=round_to(safe_mean(list(best.values()) + all_grades), precision),
        completion_rate=round_to(
            percentage(max(active_quiz, active_assignment), enrolled_count), precision
        ),
        engagement_score=round_to(
            percentage(active_quiz + active_assignment + active_attendance, enrolled_count * 3),
            precision,
        ),
    )

    return ClassPerformance(
        class_id=class_id,
        class_name=class_info.name if class_info else "",
        class_code=class_info.code if class_info else "",
        student_count=enrolled_count,
        quiz_performance=quiz_block,
        assignment_performance=assignment_block,
        attendance_performance=attendance_block,
        overall_performance=overall_block,
        distribution=calculate_stats(list(best.values())),
    )


def compute_teaching_overview(
    records: RecordSet,
    now: datetime,
    active_window_days: int = 30,
    passing_score: float = 70,
    precision: int | None = 2,
    summary_precision: int | None = 0,
) -> TeachingOverview:
    """Headline numbers across every class in ``records``.

    ``class_analytics`` is left empty; callers fill it per class so that one
    failing class does not hide the others.
    """
    classes = records.catalog.classes
    class_ids = {c.id for c in classes}
    students = {e.student_id for e in records.enrollments if e.class_id in class_ids}
    total_students = len(students)

    best_scores = list(_best_by_student_and_quiz(records.attempts).values())
    # Zero and missing grades are left out of the grade average
    positive_grades = [s.grade for s in records.submissions if s.grade]

    submitters = {s.student_id for s in records.submissions}
    cutoff = now - timedelta(days=active_window_days)
    active = {a.student_id for a in records.attempts if a.started_at >= cutoff}
    active |= {s.student_id for s in records.submissions if s.submitted_at >= cutoff}

    total_quizzes = sum(c.quiz_count for c in classes)
    total_assignments = sum(c.assignment_count for c in classes)
    total_notes = sum(c.note_count for c in classes)
    passing = [score for score in best_scores if score >= passing_score]

    return TeachingOverview(
        total_students=total_students,
        total_classes=len(classes),
        average_grade=round_to(safe_mean(best_scores + positive_grades), precision),
        completion_rate=round_to(percentage(len(submitters), total_students), summary_precision),
        active_students=len(active),
        total_assignments=total_assignments,
        total_quizzes=total_quizzes,
        total_notes=total_notes,
        student_engagement=round_to(percentage(len(active), total_students), summary_precision),
        quiz_pass_rate=round_to(percentage(len(passing), len(best_scores)), summary_precision),
        content_per_student=round_to(
            (total_notes + total_quizzes + total_assignments) / total_students
            if total_students else 0,
            summary_precision,
        ),
    )
