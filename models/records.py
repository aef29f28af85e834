"""Source records consumed by the aggregation engine.

These mirror the rows the data-access layer fetches (attempts, submissions,
attendance, enrollments) plus the catalog of classes, quizzes and assignments
used for denominators, titles and max scores. Records are frozen; the
engine only reads them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field, PrivateAttr

from models.base import CamelModel, RecordModel, UtcDatetime


class AttendanceStatus(str, Enum):
    """Known attendance statuses."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class ContentStatus(str, Enum):
    """Publication status shared by quizzes and assignments."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CLOSED = "CLOSED"


# ---------------------------------------------------------------------------
# Student activity
# ---------------------------------------------------------------------------

class QuizAnswer(RecordModel):
    """A single answered question inside an attempt."""
    question_id: str
    is_correct: bool = False


class QuizAttempt(RecordModel):
    """One attempt by a student at a quiz. A student may attempt a quiz many times."""
    id: str
    student_id: str
    quiz_id: str
    score: float | None = Field(default=None, allow_inf_nan=False)
    started_at: UtcDatetime
    completed_at: UtcDatetime | None = None
    time_spent: int | None = None  # seconds
    answers: list[QuizAnswer] = Field(default_factory=list)


class AssignmentSubmission(RecordModel):
    """A student's submission for an assignment."""
    id: str
    student_id: str
    assignment_id: str
    grade: float | None = Field(default=None, allow_inf_nan=False)
    max_grade: float | None = Field(default=None, allow_inf_nan=False)  # None means out of 100
    submitted_at: UtcDatetime


class AttendanceRecord(RecordModel):
    """A student's attendance mark for one session.

    ``status`` is kept as free text so an unexpected value from the store
    still parses; the engine classifies it.
    """
    student_id: str
    session_id: str
    status: str
    marked_at: UtcDatetime | None = None
    notes: str = ""


class AttendanceSession(RecordModel):
    """A scheduled class meeting that attendance is taken for."""
    id: str
    class_id: str
    date: UtcDatetime
    title: str = ""


class Enrollment(RecordModel):
    student_id: str
    class_id: str
    enrolled_at: UtcDatetime | None = None


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ClassInfo(RecordModel):
    """A class with its content counts (used as completion denominators)."""
    id: str
    name: str
    code: str = ""
    quiz_count: int = 0
    assignment_count: int = 0
    note_count: int = 0
    session_count: int = 0


class QuizQuestion(RecordModel):
    id: str
    points: float = 1


class QuizInfo(RecordModel):
    id: str
    class_id: str
    title: str = ""
    status: str = ContentStatus.PUBLISHED.value
    questions: list[QuizQuestion] = Field(default_factory=list)
    created_at: UtcDatetime | None = None

    @property
    def max_score(self) -> float:
        """Sum of the point values of every question."""
        return float(sum(q.points for q in self.questions))


class AssignmentInfo(RecordModel):
    id: str
    class_id: str
    title: str = ""
    status: str = ContentStatus.PUBLISHED.value
    due_date: UtcDatetime | None = None
    created_at: UtcDatetime | None = None


class Catalog(CamelModel):
    """Classes, quizzes and assignments, indexed by id."""

    classes: list[ClassInfo] = Field(default_factory=list)
    quizzes: list[QuizInfo] = Field(default_factory=list)
    assignments: list[AssignmentInfo] = Field(default_factory=list)

    _classes_by_id: dict[str, ClassInfo] = PrivateAttr(default_factory=dict)
    _quizzes_by_id: dict[str, QuizInfo] = PrivateAttr(default_factory=dict)
    _assignments_by_id: dict[str, AssignmentInfo] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._classes_by_id = {c.id: c for c in self.classes}
        self._quizzes_by_id = {q.id: q for q in self.quizzes}
        self._assignments_by_id = {a.id: a for a in self.assignments}

    def get_class(self, class_id: str) -> ClassInfo | None:
        return self._classes_by_id.get(class_id)

    def get_quiz(self, quiz_id: str) -> QuizInfo | None:
        return self._quizzes_by_id.get(quiz_id)

    def get_assignment(self, assignment_id: str) -> AssignmentInfo | None:
        return self._assignments_by_id.get(assignment_id)

    def class_code_for(self, class_id: str) -> str:
        info = self.get_class(class_id)
        return info.code if info else ""


class RecordSet(CamelModel):
    """Everything fetched for one student, class or teacher request."""

    catalog: Catalog = Field(default_factory=Catalog)
    enrollments: list[Enrollment] = Field(default_factory=list)
    attempts: list[QuizAttempt] = Field(default_factory=list)
    submissions: list[AssignmentSubmission] = Field(default_factory=list)
    attendance_records: list[AttendanceRecord] = Field(default_factory=list)
    sessions: list[AttendanceSession] = Field(default_factory=list)

    def for_student(self, student_id: str) -> "RecordSet":
        """Return a copy keeping only ``student_id``'s activity rows."""
        return RecordSet(
            catalog=self.catalog,
            enrollments=[e for e in self.enrollments if e.student_id == student_id],
            attempts=[a for a in self.attempts if a.student_id == student_id],
            submissions=[s for s in self.submissions if s.student_id == student_id],
            attendance_records=[
                r for r in self.attendance_records if r.student_id == student_id
            ],
            sessions=self.sessions,
        )
