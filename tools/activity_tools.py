"""Recent-activity and upcoming-deadline feeds.

Quiz attempts and assignment submissions are merged into one time-ordered
feed; published assignments and quizzes into a deadline feed. Every function
takes ``now`` explicitly so labels are reproducible.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable

from models.records import (
    AssignmentInfo,
    AssignmentSubmission,
    Catalog,
    ContentStatus,
    QuizAttempt,
    QuizInfo,
)
from models.stats import ActivityItem, DeadlineItem

MINUTE = 60
HOUR = 3600
DAY = 86400
MONTH = 30 * DAY

AVAILABLE_NOW = "Available now"


def format_time_ago(then: datetime, now: datetime) -> str:
    """Relative label: Just now, N minutes/hours/days ago, or N months ago."""
    seconds = math.floor((now - then).total_seconds())
    if seconds < MINUTE:
        return "Just now"
    if seconds < HOUR:
        return f"{seconds // MINUTE} minutes ago"
    if seconds < DAY:
        return f"{seconds // HOUR} hours ago"
    if seconds < MONTH:
        return f"{seconds // DAY} days ago"
    return f"{seconds // MONTH} months ago"


def format_due_date(due: datetime | None, now: datetime) -> str:
    """Due-date label: Overdue, Today, Tomorrow, N days, Next week or M/D/YYYY."""
    if due is None:
        return "No due date"
    days = math.floor((due - now).total_seconds() / DAY)
    if days < 0:
        return "Overdue"
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    if days < 7:
        return f"{days} days"
    if days < 14:
        return "Next week"
    return f"{due.month}/{due.day}/{due.year}"


def _is_published(status: str) -> bool:
    return status.strip().upper() == ContentStatus.PUBLISHED.value


def merge_recent_activity(
    attempts: Iterable[QuizAttempt],
    submissions: Iterable[AssignmentSubmission],
    catalog: Catalog,
    now: datetime,
    limit: int = 10,
) -> list[ActivityItem]:
    """Merge attempts and submissions into one feed, newest first.

    Quiz items are keyed ``quiz-<attemptId>`` and carry the attempt score;
    assignment items are keyed ``assignment-<submissionId>``.
    """
    items: list[ActivityItem] = []
    for attempt in attempts:
        quiz = catalog.get_quiz(attempt.quiz_id)
        items.append(ActivityItem(
            id=f"quiz-{attempt.id}",
            type="quiz",
            title=quiz.title if quiz else "",
            class_code=catalog.class_code_for(quiz.class_id) if quiz else "",
            score=attempt.score,
            occurred_at=attempt.started_at,
            time=format_time_ago(attempt.started_at, now),
        ))
    for submission in submissions:
        assignment = catalog.get_assignment(submission.assignment_id)
        items.append(ActivityItem(
            id=f"assignment-{submission.id}",
            type="assignment",
            title=assignment.title if assignment else "",
            class_code=catalog.class_code_for(assignment.class_id) if assignment else "",
            occurred_at=submission.submitted_at,
            time=format_time_ago(submission.submitted_at, now),
        ))

    items.sort(key=lambda item: item.occurred_at, reverse=True)
    return items[:limit]


def merge_upcoming_deadlines(
    assignments: Iterable[AssignmentInfo],
    quizzes: Iterable[QuizInfo],
    submissions: Iterable[AssignmentSubmission],
    attempts: Iterable[QuizAttempt],
    catalog: Catalog,
    now: datetime,
    window_days: int = 7,
    limit: int = 10,
) -> list[DeadlineItem]:
    """Published assignments due within the window, then published quizzes.

    Assignments are ordered by due date and always come before quizzes;
    quizzes have no due date and keep their input order.
    """
    submissions = list(submissions)
    submitted = {s.assignment_id for s in submissions}
    graded = {s.assignment_id for s in submissions if s.grade is not None}
    attempted = {a.quiz_id for a in attempts}
    window_end = now + timedelta(days=window_days)

    upcoming = sorted(
        (
            a for a in assignments
            if _is_published(a.status)
            and a.due_date is not None
            and now <= a.due_date <= window_end
        ),
        key=lambda a: a.due_date,
    )
    items = [
        DeadlineItem(
            id=f"assignment-{a.id}",
            type="assignment",
            title=a.title,
            class_code=catalog.class_code_for(a.class_id),
            due_at=a.due_date,
            due_date=format_due_date(a.due_date, now),
            completed=a.id in submitted,
            graded=a.id in graded,
            assignment_id=a.id,
        )
        for a in upcoming
    ]
    items.extend(
        DeadlineItem(
            id=f"quiz-{q.id}",
            type="quiz",
            title=q.title,
            class_code=catalog.class_code_for(q.class_id),
            due_date=AVAILABLE_NOW,
            completed=q.id in attempted,
            quiz_id=q.id,
        )
        for q in quizzes
        if _is_published(q.status)
    )
    return items[:limit]
