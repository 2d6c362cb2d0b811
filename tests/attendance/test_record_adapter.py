from datetime import date

import pytest

from src.attendance_alerts.attendance_alerts.attendance.adapter import record_from_row, records_from_rows
from src.attendance_alerts.attendance_alerts.core.enums import AttendanceStatus
from src.attendance_alerts.attendance_alerts.core.exceptions import ValidationError


def test_console_json_aliases_are_normalized():
    rec = record_from_row(
        {
            "id": 5,
            "timestamp": "2024-01-10T08:00:00Z",
            "status": "Absent",
            "remarks": "sick",
            "subjectId": "10",
            "subjectName": "Math",
            "student": {"id": "42", "studentNumber": "S-042"},
        }
    )

    assert rec.date == "2024-01-10T08:00:00Z"
    assert rec.status == AttendanceStatus.ABSENT
    assert rec.notes == "sick"
    assert rec.student_id == 42
    assert rec.subject_id == 10
    assert rec.subject_name == "Math"


def test_mysql_row_shape():
    rec = record_from_row(
        {"student_id": 3, "subject_id": None, "subject_name": None, "date": date(2024, 2, 1), "status": "late", "remarks": None}
    )

    assert rec.date == date(2024, 2, 1)
    assert rec.status == AttendanceStatus.LATE
    assert rec.student_id == 3
    assert rec.subject_id is None
    assert rec.notes is None


def test_date_wins_over_timestamp_and_notes_over_remarks():
    rec = record_from_row({"date": "2024-03-01", "timestamp": "2024-03-02", "status": "present", "notes": "a", "remarks": "b"})

    assert rec.date == "2024-03-01"
    assert rec.notes == "a"


def test_unknown_status_is_rejected():
    with pytest.raises(ValidationError):
        record_from_row({"date": "2024-03-01", "status": "holiday"})


def test_records_from_rows():
    rows = [{"date": "2024-03-01", "status": "present"}, {"date": "2024-03-02", "status": "excused"}]

    assert [r.status for r in records_from_rows(rows)] == [AttendanceStatus.PRESENT, AttendanceStatus.EXCUSED]
