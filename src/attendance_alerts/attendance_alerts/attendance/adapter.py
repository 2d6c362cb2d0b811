"""Ingestion boundary for attendance rows.

Rows arrive either from MySQL (snake_case columns) or as JSON from the
console (camelCase, ``timestamp`` instead of ``date``, ``remarks`` instead of
``notes``, sometimes a populated ``student`` object). Everything past this
module only sees :class:`AttendanceRecord`.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceRecord


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_status(value: Any) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {value!r}")


def record_from_row(row: Mapping[str, Any]) -> AttendanceRecord:
    student = row.get("student") or {}
    student_id = _first(row, "student_id", "studentId")
    if student_id is None and isinstance(student, Mapping):
        student_id = _first(student, "id", "_id")

    return AttendanceRecord(
        date=_first(row, "date", "timestamp", "attendance_date"),
        status=parse_status(row.get("status")),
        student_id=_optional_int(student_id),
        subject_id=_optional_int(_first(row, "subject_id", "subjectId")),
        subject_name=_first(row, "subject_name", "subjectName"),
        notes=_first(row, "notes", "remarks"),
    )


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[AttendanceRecord]:
    return [record_from_row(r) for r in rows]
