from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status recorded per student per session."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


ATTENDED_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.EXCUSED})


class AlertType(str, Enum):
    CONSECUTIVE_ABSENCE = "consecutive_absence"
    LOW_ATTENDANCE = "low_attendance"
    PATTERN_WARNING = "pattern_warning"


class AlertSeverity(str, Enum):
    """Severity shown by the alert center (critical first)."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class Recipient(str, Enum):
    """Who receives an alert notification."""

    GUARDIAN = "guardian"
    STUDENT = "student"
    ADMIN = "admin"
