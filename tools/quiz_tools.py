"""Quiz aggregation — best-score rollups, per-subject statistics, quiz reports.

Only the best attempt per quiz counts toward a student's aggregates; repeat
attempts never inflate completion counts. A missing score counts as 0 but
still marks the quiz as attempted.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Mapping

from errors.exceptions import AnalyticsError, EntityNotFoundError
from models.records import Catalog, QuizAttempt, QuizInfo
from models.stats import (
    AttemptSummary,
    QuestionStat,
    QuizPerformance,
    QuizReport,
    QuizStats,
    SubjectQuizStat,
)
from tools.stats_tools import percentage, round_to, safe_mean

logger = logging.getLogger(__name__)


def best_scores_by_quiz(attempts: Iterable[QuizAttempt]) -> dict[str, float]:
    """Map each attempted quiz id to its best score (missing scores count as 0)."""
    best: dict[str, float] = {}
    for attempt in attempts:
        score = float(attempt.score or 0)
        best[attempt.quiz_id] = max(best.get(attempt.quiz_id, 0.0), score)
    return best


def compute_quiz_stats(attempts: list[QuizAttempt], precision: int | None = 0) -> QuizStats:
    """Best-score rollup over one student's attempts.

    Args:
        attempts: The student's attempts, optionally scoped to a class.
        precision: Decimals for ``average_score``; integer by default.

    Returns:
        :class:`QuizStats` with the distinct-quiz completion count, the best
        score per quiz and the mean of those best scores (0 when empty).
    """
    best = best_scores_by_quiz(attempts)
    average = round_to(safe_mean(best.values()), precision) if best else 0
    return QuizStats(
        completed_count=len(best),
        best_score_by_quiz=best,
        average_score=average,
    )


def compute_quiz_performance(
    attempts: list[QuizAttempt],
    catalog: Catalog,
) -> list[QuizPerformance]:
    """One row per attempted quiz: best score, attempt count, last attempt.

    Rows are ordered by most recent attempt first.
    """
    rows: dict[str, QuizPerformance] = {}
    for attempt in attempts:
        score = float(attempt.score or 0)
        row = rows.get(attempt.quiz_id)
        if row is None:
            quiz = catalog.get_quiz(attempt.quiz_id)
            if quiz is None:
                logger.warning("Attempt %s references unknown quiz %s", attempt.id, attempt.quiz_id)
            class_info = catalog.get_class(quiz.class_id) if quiz else None
            rows[attempt.quiz_id] = QuizPerformance(
                quiz_id=attempt.quiz_id,
                quiz_title=quiz.title if quiz else "",
                class_id=quiz.class_id if quiz else "",
                class_name=class_info.name if class_info else "",
                class_code=class_info.code if class_info else "",
                score=score,
                max_score=quiz.max_score if quiz else 0,
                attempts=1,
                last_attempt_date=attempt.started_at,
            )
            continue

        updates: dict = {"attempts": row.attempts + 1}
        if score > row.score:
            updates["score"] = score
        if row.last_attempt_date is None or attempt.started_at > row.last_attempt_date:
            updates["last_attempt_date"] = attempt.started_at
        rows[attempt.quiz_id] = row.model_copy(update=updates)

    return sorted(
        rows.values(),
        key=lambda r: r.last_attempt_date.timestamp() if r.last_attempt_date else float("-inf"),
        reverse=True,
    )


def group_attempts_by_class(
    attempts: Iterable[QuizAttempt],
    catalog: Catalog,
) -> dict[str, list[QuizAttempt]]:
    """Group attempts by the class their quiz belongs to.

    Attempts on quizzes missing from the catalog cannot be placed and are
    dropped with a warning, so they never count toward any class's subject
    stats.
    """
    grouped: dict[str, list[QuizAttempt]] = defaultdict(list)
    for attempt in attempts:
        quiz = catalog.get_quiz(attempt.quiz_id)
        if quiz is None:
            logger.warning("Cannot group attempt %s: unknown quiz %s", attempt.id, attempt.quiz_id)
            continue
        grouped[quiz.class_id].append(attempt)
    return dict(grouped)


def compute_class_quiz_stat(
    class_id: str,
    attempts: list[QuizAttempt],
    catalog: Catalog,
    max_scores: dict[str, float] | None = None,
    precision: int | None = 2,
) -> SubjectQuizStat:
    """Quiz rollup for a single class.

    ``max_scores`` is a quiz id → max score cache shared across classes; a
    quiz's max score is summed from its questions the first time it is seen.

    Attempts arriving through ``group_attempts_by_class`` always reference a
    catalog quiz, since grouping drops the rest; the check below guards
    callers that build the per-class lists themselves.

    Raises:
        EntityNotFoundError: An attempt references a quiz not in the catalog.
    """
    if max_scores is None:
        max_scores = {}

    best: dict[str, float] = {}
    for attempt in attempts:
        if attempt.quiz_id not in max_scores:
            quiz = catalog.get_quiz(attempt.quiz_id)
            if quiz is None:
                raise EntityNotFoundError("subject_quiz_stats", attempt.quiz_id, "quiz")
            max_scores[attempt.quiz_id] = quiz.max_score
        score = float(attempt.score or 0)
        best[attempt.quiz_id] = max(best.get(attempt.quiz_id, 0.0), score)

    total_score = sum(best.values())
    total_max_score = sum(max_scores[quiz_id] for quiz_id in best)
    # Clamp at 100 so bonus points cannot push a quiz past full marks
    quiz_percentages = [
        min(score / max_scores[quiz_id] * 100, 100) if max_scores[quiz_id] > 0 else 0
        for quiz_id, score in best.items()
    ]
    # Denominator is the attempt count, not the number of distinct quizzes
    average_score = total_score / len(attempts) if attempts else 0

    class_info = catalog.get_class(class_id)
    return SubjectQuizStat(
        class_id=class_id,
        class_name=class_info.name if class_info else "",
        class_code=class_info.code if class_info else "",
        total_quizzes=len(best),
        total_attempts=len(attempts),
        total_score=total_score,
        total_max_score=total_max_score,
        average_score=round_to(average_score, precision),
        average_percentage=round_to(safe_mean(quiz_percentages), precision),
    )


def compute_subject_quiz_stats(
    attempts_by_class: Mapping[str, list[QuizAttempt]],
    catalog: Catalog,
    precision: int | None = 2,
) -> list[SubjectQuizStat]:
    """Per-class quiz rollups for a student.

    A class whose rollup fails is logged and left out; the other classes are
    still returned.
    """
    max_scores: dict[str, float] = {}
    stats: list[SubjectQuizStat] = []
    for class_id, attempts in attempts_by_class.items():
        try:
            stats.append(
                compute_class_quiz_stat(class_id, attempts, catalog, max_scores, precision)
            )
        except AnalyticsError as exc:
            logger.warning("Skipping quiz stats for class %s: %s", class_id, exc)
        except Exception:
            logger.exception("Quiz stats failed for class %s, skipping", class_id)
    return stats


def compute_quiz_report(
    quiz: QuizInfo,
    attempts: list[QuizAttempt],
    recent_limit: int = 10,
) -> QuizReport:
    """Teacher report for one quiz, scored from question-level answers.

    An attempt's score is the share of questions answered correctly. Only
    completed attempts contribute to scores and time spent; the completion
    rate compares them with every attempt started.
    """
    attempts = [a for a in attempts if a.quiz_id == quiz.id]
    completed = [a for a in attempts if a.completed_at is not None]
    question_count = len(quiz.questions)

    def attempt_score(attempt: QuizAttempt) -> float:
        correct = sum(1 for answer in attempt.answers if answer.is_correct)
        return percentage(correct, question_count)

    scores = [attempt_score(a) for a in completed]

    question_stats = []
    for question in quiz.questions:
        answers = [
            answer
            for attempt in attempts
            for answer in attempt.answers
            if answer.question_id == question.id
        ]
        correct = sum(1 for answer in answers if answer.is_correct)
        question_stats.append(QuestionStat(
            question_id=question.id,
            correct_answers=correct,
            total_answers=len(answers),
            success_rate=percentage(correct, len(answers)),
        ))

    recent = sorted(completed, key=lambda a: a.completed_at, reverse=True)[:recent_limit]

    return QuizReport(
        quiz_id=quiz.id,
        title=quiz.title,
        total_attempts=len(attempts),
        average_score=round_to(safe_mean(scores), 1),
        highest_score=round_to(max(scores), 0) if scores else 0,
        lowest_score=round_to(min(scores), 0) if scores else 0,
        completion_rate=round_to(percentage(len(completed), len(attempts)), 1),
        average_time_spent=round_to(safe_mean(a.time_spent or 0 for a in completed), 0),
        question_stats=question_stats,
        recent_attempts=[
            AttemptSummary(
                id=a.id,
                student_id=a.student_id,
                score=round_to(attempt_score(a), 0),
                time_spent=a.time_spent or 0,
                completed_at=a.completed_at,
            )
            for a in recent
        ],
    )
