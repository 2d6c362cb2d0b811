from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.attendance_alerts.attendance_alerts.alerts.config import AlertConfig
from src.attendance_alerts.attendance_alerts.alerts.model import AttendanceAlert
from src.attendance_alerts.attendance_alerts.alerts.service import AlertService
from src.attendance_alerts.attendance_alerts.attendance.model import AttendanceRecord
from src.attendance_alerts.attendance_alerts.core.enums import AttendanceStatus
from src.attendance_alerts.attendance_alerts.students.model import Student

NOW = datetime(2024, 1, 10, 15, 30)


class InMemoryStudents:
    def __init__(self, students: list[Student]):
        self._by_id = {s.student_id: s for s in students}

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._by_id.get(student_id)

    def list_active(self):
        return list(self._by_id.values())


class InMemoryAttendance:
    def __init__(self, records: dict[int, list[AttendanceRecord]]):
        self._records = records

    def list_for_student(self, student_id: int):
        return list(self._records.get(student_id, []))


class InMemoryAlerts:
    def __init__(self):
        self._alerts: dict[int, AttendanceAlert] = {}
        self._next_id = 1

    def list_alerts(self, *, alert_type=None, severity=None, acknowledged=None, student_id=None, subject_id=None, limit=None):
        items = [
            a
            for a in self._alerts.values()
            if (alert_type is None or a.type == alert_type)
            and (severity is None or a.severity == severity)
            and (acknowledged is None or a.acknowledged == acknowledged)
            and (student_id is None or a.student_id == student_id)
            and (subject_id is None or a.subject_id == subject_id)
        ]
        items.sort(key=lambda a: a.alert_id, reverse=True)
        return items[:limit] if limit is not None else items

    def get_by_id(self, alert_id: int) -> Optional[AttendanceAlert]:
        return self._alerts.get(alert_id)

    def create(self, alert: AttendanceAlert) -> int:
        alert_id = self._next_id
        self._next_id += 1
        self._alerts[alert_id] = replace(alert, alert_id=alert_id)
        return alert_id

    def has_open_alert(self, *, student_id, alert_type, subject_id) -> bool:
        return any(
            a.student_id == student_id and a.type == alert_type and a.subject_id == subject_id and not a.acknowledged
            for a in self._alerts.values()
        )

    def acknowledge(self, *, alert_ids, acknowledged_at, acknowledged_by) -> int:
        count = 0
        for alert_id in alert_ids:
            a = self._alerts.get(alert_id)
            if a and not a.acknowledged:
                self._alerts[alert_id] = replace(
                    a, acknowledged=True, acknowledged_at=acknowledged_at, acknowledged_by=acknowledged_by
                )
                count += 1
        return count

    def delete(self, alert_id: int) -> bool:
        return self._alerts.pop(alert_id, None) is not None


class InMemoryConfigs:
    def __init__(self, config: Optional[AlertConfig] = None):
        self.config = config

    def get(self) -> Optional[AlertConfig]:
        return self.config

    def save(self, config: AlertConfig) -> None:
        self.config = config


class RecordingNotifier:
    def __init__(self):
        self.sent: list[dict] = []

    def send(self, *, to: str, subject: str, body: str) -> None:
        self.sent.append({"to": to, "subject": subject, "body": body})


def _math(day: int, status: AttendanceStatus) -> AttendanceRecord:
    return AttendanceRecord(date=date(2024, 1, day), status=status, student_id=1, subject_id=10, subject_name="Math")


@pytest.fixture
def students():
    return InMemoryStudents(
        [
            Student(
                student_id=1,
                student_number="S-001",
                first_name="Ana",
                last_name="Cruz",
                email="ana@school.test",
                guardian_email="parent.cruz@mail.test",
            ),
            Student(student_id=2, student_number="S-002", first_name="Ben", last_name="Lim"),
        ]
    )


@pytest.fixture
def attendance():
    return InMemoryAttendance(
        {
            1: [
                _math(5, AttendanceStatus.PRESENT),
                _math(8, AttendanceStatus.ABSENT),
                _math(9, AttendanceStatus.ABSENT),
                _math(10, AttendanceStatus.ABSENT),
            ],
            2: [
                AttendanceRecord(date=date(2024, 1, d), status=AttendanceStatus.PRESENT, student_id=2)
                for d in (8, 9, 10)
            ],
        }
    )


@pytest.fixture
def alerts_repo():
    return InMemoryAlerts()


@pytest.fixture
def configs():
    return InMemoryConfigs()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(alerts_repo, configs, students, attendance, notifier):
    return AlertService(
        alerts_repo,
        configs,
        students,
        attendance,
        notifier=notifier,
        admin_email="admin@school.test",
        clock=lambda: NOW,
    )
