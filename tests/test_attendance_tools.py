"""Tests for weighted attendance."""

import logging

import pytest

from models.records import AttendanceStatus
from tests.factories import make_record
from tools.attendance_tools import (
    ATTENDANCE_WEIGHTS,
    classify_status,
    compute_attendance_rate,
    compute_class_attendance_overview,
    compute_session_attendance,
    compute_subject_attendance_stats,
)


def _records(*statuses):
    return [make_record(f"se-{i}", status) for i, status in enumerate(statuses)]


class TestComputeAttendanceRate:

    def test_all_present(self):
        assert compute_attendance_rate(_records(*["PRESENT"] * 7)).attendance_rate == 100.0

    def test_all_absent(self):
        assert compute_attendance_rate(_records(*["ABSENT"] * 4)).attendance_rate == 0.0

    def test_half_present(self):
        stat = compute_attendance_rate(_records("PRESENT", "PRESENT", "ABSENT", "ABSENT"))
        assert stat.attendance_rate == 50.0

    def test_late_and_excused_get_partial_credit(self):
        """(0.5 + 0.75) / 4 * 100 — a plain present ratio would give 0."""
        stat = compute_attendance_rate(_records("LATE", "EXCUSED", "ABSENT", "ABSENT"))
        assert stat.weighted_attendance == 1.25
        assert stat.attendance_rate == 31.25
        assert (stat.present, stat.late, stat.excused, stat.absent, stat.total) == (0, 1, 1, 2, 4)

    def test_empty_is_zero(self):
        stat = compute_attendance_rate([])
        assert stat.total == 0
        assert stat.attendance_rate == 0

    def test_weights(self):
        assert ATTENDANCE_WEIGHTS == {
            AttendanceStatus.PRESENT: 1.0,
            AttendanceStatus.LATE: 0.5,
            AttendanceStatus.EXCUSED: 0.75,
            AttendanceStatus.ABSENT: 0.0,
        }

    def test_unknown_status_is_zero_weight(self, caplog):
        """A malformed status does not abort or poison the other records."""
        with caplog.at_level(logging.WARNING):
            stat = compute_attendance_rate(_records("PRESENT", "TARDY"))
        assert stat.unrecognized == 1
        assert stat.total == 2
        assert stat.attendance_rate == 50.0
        assert "TARDY" in caplog.text

    def test_precision(self):
        stat = compute_attendance_rate(_records("PRESENT", "LATE", "ABSENT"), precision=1)
        assert stat.attendance_rate == 50.0
        stat = compute_attendance_rate(_records("PRESENT", "ABSENT", "ABSENT"), precision=1)
        assert stat.attendance_rate == 33.3

    def test_idempotent(self):
        records = _records("PRESENT", "LATE", "EXCUSED")
        assert compute_attendance_rate(records) == compute_attendance_rate(records)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("PRESENT", AttendanceStatus.PRESENT),
        ("late", AttendanceStatus.LATE),
        (" Excused ", AttendanceStatus.EXCUSED),
        ("NOT_MARKED", None),
        (None, None),
    ],
)
def test_classify_status(raw, expected):
    assert classify_status(raw) is expected


def test_subject_attendance_stats(record_set):
    s1_records = [r for r in record_set.attendance_records if r.student_id == "s-1"]
    stats = compute_subject_attendance_stats(
        s1_records,
        record_set.sessions,
        ["c-math", "c-sci", "c-none"],
        record_set.catalog,
    )

    by_class = {s.class_id: s for s in stats}
    assert by_class["c-math"].attendance_rate == 75.0  # PRESENT + LATE
    assert by_class["c-math"].class_code == "MATH101"
    assert by_class["c-sci"].attendance_rate == 75.0  # EXCUSED
    assert by_class["c-none"].total == 0


def test_session_attendance_counts_unmarked_sessions(record_set):
    sci_sessions = [s for s in record_set.sessions if s.class_id == "c-sci"]
    view = compute_session_attendance("s-2", sci_sessions, record_set.attendance_records)

    assert view.total_sessions == 1
    assert view.not_marked == 1
    assert view.attendance_rate == 0
    assert view.sessions[0].status == "NOT_MARKED"


def test_session_attendance_newest_first(record_set):
    math_sessions = [s for s in record_set.sessions if s.class_id == "c-math"]
    view = compute_session_attendance("s-2", math_sessions, record_set.attendance_records)

    assert [s.session_id for s in view.sessions] == ["se-2", "se-1", "se-old"]
    assert (view.present, view.absent, view.not_marked) == (2, 1, 0)
    assert view.attendance_rate == 66.7


def test_class_overview(record_set):
    recent = [s for s in record_set.sessions if s.id in {"se-1", "se-2"}]
    overview = compute_class_attendance_overview(
        "c-math", recent, record_set.attendance_records, ["s-1", "s-2"]
    )

    assert overview.total_sessions == 2
    assert overview.total_students == 2
    rates = {s.student_id: s.attendance_rate for s in overview.student_stats}
    assert rates == {"s-1": 75.0, "s-2": 50.0}
    assert (overview.total_present, overview.total_late, overview.total_absent) == (2, 1, 1)
    assert overview.overall_attendance_rate == 62.5
    assert [s.session_id for s in overview.sessions] == ["se-2", "se-1"]
    assert overview.sessions[1].present == 1
    assert overview.sessions[1].absent == 1


def test_class_overview_ignores_other_classes(record_set):
    overview = compute_class_attendance_overview(
        "c-sci", record_set.sessions, record_set.attendance_records, ["s-1"]
    )
    assert overview.total_sessions == 1
    assert overview.student_stats[0].excused == 1
