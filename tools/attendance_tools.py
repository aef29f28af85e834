"""Attendance aggregation with weighted partial credit.

A session counts fully when the student is present, half when late, three
quarters when excused and not at all when absent. The rate is the weighted
sum over the number of records, never a plain present/total ratio.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from models.records import AttendanceRecord, AttendanceSession, AttendanceStatus, Catalog
from models.stats import (
    AttendanceStat,
    ClassAttendanceOverview,
    SessionAttendance,
    SessionBreakdown,
    SessionStatus,
    StudentAttendanceStat,
    SubjectAttendanceStat,
)
from tools.stats_tools import percentage, round_to

logger = logging.getLogger(__name__)

ATTENDANCE_WEIGHTS: dict[AttendanceStatus, float] = {
    AttendanceStatus.PRESENT: 1.0,
    AttendanceStatus.LATE: 0.5,
    AttendanceStatus.EXCUSED: 0.75,
    AttendanceStatus.ABSENT: 0.0,
}

NOT_MARKED = "NOT_MARKED"


def classify_status(status: str | None) -> AttendanceStatus | None:
    """Parse a stored status; ``None`` for anything unrecognized."""
    if status is None:
        return None
    try:
        return AttendanceStatus(str(status).strip().upper())
    except ValueError:
        return None


def _tally(statuses: Iterable[str]) -> dict[str, int]:
    counts = {s: 0 for s in AttendanceStatus}
    unrecognized = 0
    for raw in statuses:
        status = classify_status(raw)
        if status is None:
            unrecognized += 1
            logger.warning("Unrecognized attendance status %r counted with zero weight", raw)
            continue
        counts[status] += 1
    return {
        "present": counts[AttendanceStatus.PRESENT],
        "absent": counts[AttendanceStatus.ABSENT],
        "late": counts[AttendanceStatus.LATE],
        "excused": counts[AttendanceStatus.EXCUSED],
        "unrecognized": unrecognized,
    }


def weighted_attendance(present: int, late: int, excused: int, absent: int = 0) -> float:
    return (
        present * ATTENDANCE_WEIGHTS[AttendanceStatus.PRESENT]
        + late * ATTENDANCE_WEIGHTS[AttendanceStatus.LATE]
        + excused * ATTENDANCE_WEIGHTS[AttendanceStatus.EXCUSED]
        + absent * ATTENDANCE_WEIGHTS[AttendanceStatus.ABSENT]
    )


def compute_attendance_rate(
    records: Iterable[AttendanceRecord],
    precision: int | None = 2,
) -> AttendanceStat:
    """Weighted attendance rate over a set of records.

    Unrecognized statuses stay in ``total`` with zero weight so one malformed
    record cannot abort the computation.

    Args:
        records: Attendance records, typically one student in one class.
        precision: Decimals for ``attendance_rate``.

    Returns:
        :class:`AttendanceStat` with per-status counts and the rate (0 when
        there are no records).
    """
    records = list(records)
    counts = _tally(r.status for r in records)
    total = len(records)
    weighted = weighted_attendance(
        counts["present"], counts["late"], counts["excused"], counts["absent"]
    )
    return AttendanceStat(
        **counts,
        total=total,
        weighted_attendance=weighted,
        attendance_rate=round_to(percentage(weighted, total), precision),
    )


def compute_subject_attendance_stats(
    records: Iterable[AttendanceRecord],
    sessions: Iterable[AttendanceSession],
    class_ids: Iterable[str],
    catalog: Catalog,
    precision: int | None = 2,
) -> list[SubjectAttendanceStat]:
    """One weighted attendance stat per class, in ``class_ids`` order.

    Records are attributed to a class through their session; a class with no
    records gets a zeroed entry.
    """
    session_class = {s.id: s.class_id for s in sessions}
    by_class: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for record in records:
        class_id = session_class.get(record.session_id)
        if class_id is None:
            logger.debug("Attendance record for unknown session %s ignored", record.session_id)
            continue
        by_class[class_id].append(record)

    stats = []
    for class_id in class_ids:
        stat = compute_attendance_rate(by_class.get(class_id, []), precision)
        class_info = catalog.get_class(class_id)
        stats.append(SubjectAttendanceStat(
            **stat.model_dump(),
            class_id=class_id,
            class_name=class_info.name if class_info else "",
            class_code=class_info.code if class_info else "",
        ))
    return stats


def compute_session_attendance(
    student_id: str,
    sessions: Iterable[AttendanceSession],
    records: Iterable[AttendanceRecord],
    precision: int | None = 1,
) -> SessionAttendance:
    """A student's attendance across a set of sessions.

    Sessions with no record for the student count as not marked, and the
    weighted rate is taken over every session, marked or not.
    """
    sessions = sorted(sessions, key=lambda s: s.date, reverse=True)
    session_ids = {s.id for s in sessions}
    marks = {
        r.session_id: r
        for r in records
        if r.student_id == student_id and r.session_id in session_ids
    }

    counts = _tally(r.status for r in marks.values())
    rows = []
    for session in sessions:
        record = marks.get(session.id)
        rows.append(SessionStatus(
            session_id=session.id,
            date=session.date,
            title=session.title,
            status=record.status if record else NOT_MARKED,
            marked_at=record.marked_at if record else None,
        ))

    weighted = weighted_attendance(
        counts["present"], counts["late"], counts["excused"], counts["absent"]
    )
    return SessionAttendance(
        student_id=student_id,
        total_sessions=len(sessions),
        present=counts["present"],
        absent=counts["absent"],
        late=counts["late"],
        excused=counts["excused"],
        not_marked=len(sessions) - len(marks),
        attendance_rate=round_to(percentage(weighted, len(sessions)), precision),
        sessions=rows,
    )


def compute_class_attendance_overview(
    class_id: str,
    sessions: Iterable[AttendanceSession],
    records: Iterable[AttendanceRecord],
    student_ids: Iterable[str],
    precision: int | None = 1,
) -> ClassAttendanceOverview:
    """Class-wide attendance for the teacher view.

    Per-student weighted rates for every enrolled student, class totals with
    an overall weighted rate, and per-session status counts.
    """
    sessions = sorted(
        (s for s in sessions if s.class_id == class_id),
        key=lambda s: s.date,
        reverse=True,
    )
    session_ids = {s.id for s in sessions}
    student_ids = list(dict.fromkeys(student_ids))
    enrolled = set(student_ids)

    class_records = [r for r in records if r.session_id in session_ids]
    by_student: dict[str, list[AttendanceRecord]] = defaultdict(list)
    by_session: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for record in class_records:
        by_session[record.session_id].append(record)
        if record.student_id in enrolled:
            by_student[record.student_id].append(record)

    student_stats = [
        StudentAttendanceStat(
            **compute_attendance_rate(by_student.get(sid, []), precision).model_dump(),
            student_id=sid,
        )
        for sid in student_ids
    ]

    overall = compute_attendance_rate(
        (r for rs in by_student.values() for r in rs), precision
    )

    breakdown = []
    for session in sessions:
        counts = _tally(r.status for r in by_session.get(session.id, []))
        breakdown.append(SessionBreakdown(
            session_id=session.id,
            date=session.date,
            title=session.title,
            total_records=len(by_session.get(session.id, [])),
            present=counts["present"],
            absent=counts["absent"],
            late=counts["late"],
            excused=counts["excused"],
        ))

    return ClassAttendanceOverview(
        class_id=class_id,
        total_sessions=len(sessions),
        total_students=len(student_ids),
        total_present=overall.present,
        total_absent=overall.absent,
        total_late=overall.late,
        total_excused=overall.excused,
        overall_attendance_rate=overall.attendance_rate,
        student_stats=student_stats,
        sessions=breakdown,
    )
