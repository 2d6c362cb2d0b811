from __future__ import annotations

from datetime import date, datetime

from src.attendance_alerts.attendance_alerts.alerts.classifier import AlertClassifier
from src.attendance_alerts.attendance_alerts.alerts.config import DEFAULT_ALERT_CONFIG, AlertConfig
from src.attendance_alerts.attendance_alerts.alerts.factory import AlertRuleFactory
from src.attendance_alerts.attendance_alerts.alerts.rules.consecutive_absence_rule import ConsecutiveAbsenceRule
from src.attendance_alerts.attendance_alerts.alerts.rules.low_attendance_rule import LowAttendanceRule
from src.attendance_alerts.attendance_alerts.alerts.rules.pattern_rule import LatePatternRule
from src.attendance_alerts.attendance_alerts.attendance.model import AttendanceRecord
from src.attendance_alerts.attendance_alerts.core.enums import AlertSeverity, AlertType, AttendanceStatus
from src.attendance_alerts.attendance_alerts.students.model import Student

NOW = datetime(2024, 1, 10, 12, 0)
STUDENT = Student(student_id=1, student_number="S-001", first_name="Ana", last_name="Cruz")


def _rec(day: date, status: AttendanceStatus) -> AttendanceRecord:
    return AttendanceRecord(date=day, status=status, student_id=1)


def test_factory_builds_only_enabled_rules():
    factory = AlertRuleFactory()

    all_rules = factory.for_config(DEFAULT_ALERT_CONFIG)
    assert [type(r) for r in all_rules] == [ConsecutiveAbsenceRule, LowAttendanceRule, LatePatternRule]

    only_low = factory.for_config(
        AlertConfig(enable_consecutive_alerts=False, enable_pattern_alerts=False)
    )
    assert [type(r) for r in only_low] == [LowAttendanceRule]


def test_active_absence_run_is_critical_and_suppresses_low_attendance():
    records = [
        _rec(date(2024, 1, 5), AttendanceStatus.PRESENT),
        _rec(date(2024, 1, 8), AttendanceStatus.ABSENT),
        _rec(date(2024, 1, 9), AttendanceStatus.ABSENT),
        _rec(date(2024, 1, 10), AttendanceStatus.ABSENT),
    ]

    alerts = AlertClassifier(DEFAULT_ALERT_CONFIG).classify(STUDENT, records, now=NOW)

    assert len(alerts) == 1
    alert = alerts[0]
    assert alert.type == AlertType.CONSECUTIVE_ABSENCE
    assert alert.severity == AlertSeverity.CRITICAL
    assert alert.details.consecutive_days == 3
    assert (alert.details.start_date, alert.details.end_date) == ("2024-01-08", "2024-01-10")
    assert alert.message == "Ana Cruz has been absent for 3 consecutive days. Immediate attention required."
    assert alert.created_at == NOW
    assert not alert.acknowledged


def test_low_rate_without_active_run_is_warning():
    records = [
        _rec(date(2024, 1, 8), AttendanceStatus.ABSENT),
        _rec(date(2024, 1, 9), AttendanceStatus.ABSENT),
        _rec(date(2024, 1, 10), AttendanceStatus.PRESENT),
    ]

    alerts = AlertClassifier(DEFAULT_ALERT_CONFIG).classify(
        STUDENT, records, now=NOW, subject_id=7, subject_name="Science"
    )

    assert [(a.type, a.severity) for a in alerts] == [(AlertType.LOW_ATTENDANCE, AlertSeverity.WARNING)]
    assert alerts[0].details.attendance_rate == 33
    assert alerts[0].subject_id == 7
    assert alerts[0].message == "Ana Cruz's attendance rate is 33% in Science, below the 80% threshold."


def test_low_attendance_not_suppressed_when_consecutive_alerts_disabled():
    records = [
        _rec(date(2024, 1, 8), AttendanceStatus.ABSENT),
        _rec(date(2024, 1, 9), AttendanceStatus.ABSENT),
        _rec(date(2024, 1, 10), AttendanceStatus.ABSENT),
    ]
    config = AlertConfig(enable_consecutive_alerts=False)

    alerts = AlertClassifier(config).classify(STUDENT, records, now=NOW)

    assert [a.type for a in alerts] == [AlertType.LOW_ATTENDANCE]
    assert alerts[0].details.attendance_rate == 0


def test_repeated_late_arrivals_in_window_raise_pattern_info():
    recent = [_rec(date(2024, 1, d), AttendanceStatus.LATE) for d in (2, 3, 4, 8, 9)]
    old = [_rec(date(2023, 10, d), AttendanceStatus.LATE) for d in (2, 3, 4)]

    alerts = AlertClassifier(DEFAULT_ALERT_CONFIG).classify(STUDENT, recent + old, now=NOW)

    assert [(a.type, a.severity) for a in alerts] == [(AlertType.PATTERN_WARNING, AlertSeverity.INFO)]
    assert alerts[0].details.late_count == 5


def test_late_arrivals_outside_window_are_ignored():
    records = [_rec(date(2024, 1, d), AttendanceStatus.LATE) for d in (2, 3, 4, 8)]
    records.append(_rec(date(2023, 11, 1), AttendanceStatus.LATE))

    assert AlertClassifier(DEFAULT_ALERT_CONFIG).classify(STUDENT, records, now=NOW) == []


def test_no_records_no_alerts():
    assert AlertClassifier(DEFAULT_ALERT_CONFIG).classify(STUDENT, [], now=NOW) == []
