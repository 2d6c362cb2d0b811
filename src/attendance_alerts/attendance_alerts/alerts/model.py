from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from ..core.enums import AlertSeverity, AlertType


@dataclass(frozen=True)
class ConsecutiveAbsenceResult:
    count: int
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass(frozen=True)
class AlertDetails:
    consecutive_days: Optional[int] = None
    attendance_rate: Optional[int] = None
    threshold: Optional[int] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    late_count: Optional[int] = None


@dataclass(frozen=True)
class AttendanceAlert:
    type: AlertType
    severity: AlertSeverity
    student_id: int
    student_name: str
    student_number: str
    message: str
    details: AlertDetails
    created_at: datetime
    subject_id: Optional[int] = None
    subject_name: Optional[str] = None
    acknowledged: bool = False
    acknowledged_at: Optional[datetime] = None
    acknowledged_by: Optional[str] = None
    alert_id: Optional[int] = None


@dataclass(frozen=True)
class AlertSummary:
    total: int
    critical: int
    warning: int
    unacknowledged: int
    by_type: dict[AlertType, int]

    @classmethod
    def from_alerts(cls, alerts: Iterable[AttendanceAlert]) -> "AlertSummary":
        by_type = {t: 0 for t in AlertType}
        total = critical = warning = unacknowledged = 0
        for a in alerts:
            total += 1
            by_type[a.type] += 1
            if a.severity == AlertSeverity.CRITICAL:
                critical += 1
            elif a.severity == AlertSeverity.WARNING:
                warning += 1
            if not a.acknowledged:
                unacknowledged += 1
        return cls(total=total, critical=critical, warning=warning, unacknowledged=unacknowledged, by_type=by_type)


@dataclass(frozen=True)
class SubjectAttendance:
    subject_id: int
    subject_name: str
    attendance_rate: int
    consecutive_absences: int


@dataclass(frozen=True)
class StudentAttendanceAnalysis:
    """Read-model returned by the per-student analysis endpoint."""

    student_id: int
    student_name: str
    student_number: str
    overall_rate: int
    consecutive_absences: int
    guardian_email: Optional[str] = None
    last_present_date: Optional[str] = None
    alerts: list[AttendanceAlert] = field(default_factory=list)
    subjects: list[SubjectAttendance] = field(default_factory=list)
