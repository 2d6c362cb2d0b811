from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_ALERT_LIST_LIMIT, DEFAULT_CONSECUTIVE_ABSENCE_THRESHOLD, DEFAULT_LOW_ATTENDANCE_THRESHOLD
from ..core.enums import ATTENDED_STATUSES, AlertSeverity, AlertType, Recipient
from ..core.exceptions import NotFoundError, NotificationError, ValidationError
from ..notifications.notifier import Notifier
from ..students.model import Student
from ..students.repository import StudentRepository
from .classifier import AlertClassifier
from .config import DEFAULT_ALERT_CONFIG, AlertConfig, merge_config, parse_recipients
from .detection import (
    calculate_attendance_rate,
    detect_consecutive_absences,
    last_attended_date,
    trailing_absences,
)
from .model import AlertSummary, AttendanceAlert, StudentAttendanceAnalysis, SubjectAttendance
from .repository import AlertConfigRepository, AlertRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    new_alerts: int
    scanned_students: int


def _group_by_subject(records: Iterable[AttendanceRecord]) -> dict[int, list[AttendanceRecord]]:
    grouped: dict[int, list[AttendanceRecord]] = {}
    for r in records:
        if r.subject_id is None:
            continue
        grouped.setdefault(r.subject_id, []).append(r)
    return grouped


class AlertService:
    def __init__(
        self,
        alerts: AlertRepository,
        configs: AlertConfigRepository,
        students: StudentRepository,
        attendance: AttendanceRepository,
        *,
        notifier: Notifier,
        admin_email: Optional[str] = None,
        default_config: AlertConfig = DEFAULT_ALERT_CONFIG,
        clock: Callable[[], datetime] = now_local,
    ):
        self._alerts = alerts
        self._configs = configs
        self._students = students
        self._attendance = attendance
        self._notifier = notifier
        self._admin_email = admin_email
        self._default_config = default_config
        self._clock = clock

    def get_alerts(
        self,
        *,
        alert_type: Optional[AlertType] = None,
        severity: Optional[AlertSeverity] = None,
        acknowledged: Optional[bool] = None,
        student_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        limit: int = DEFAULT_ALERT_LIST_LIMIT,
    ) -> Sequence[AttendanceAlert]:
        return self._alerts.list_alerts(
            alert_type=alert_type,
            severity=severity,
            acknowledged=acknowledged,
            student_id=student_id,
            subject_id=subject_id,
            limit=limit,
        )

    def get_summary(self) -> AlertSummary:
        return AlertSummary.from_alerts(self._alerts.list_alerts())

    def _require_alert(self, alert_id: int) -> AttendanceAlert:
        alert = self._alerts.get_by_id(int(alert_id))
        if not alert:
            raise NotFoundError(f"Alert {alert_id} not found")
        return alert

    def acknowledge(self, alert_id: int, *, acknowledged_by: Optional[str] = None) -> None:
        alert = self._require_alert(alert_id)
        if alert.acknowledged:
            return
        self._alerts.acknowledge(alert_ids=[alert.alert_id], acknowledged_at=self._clock(), acknowledged_by=acknowledged_by)

    def acknowledge_multiple(self, alert_ids: Sequence[Any], *, acknowledged_by: Optional[str] = None) -> int:
        if not alert_ids:
            raise ValidationError("alertIds must not be empty")
        try:
            ids = sorted({int(i) for i in alert_ids})
        except (TypeError, ValueError):
            raise ValidationError("alertIds must be integers")
        count = self._alerts.acknowledge(alert_ids=ids, acknowledged_at=self._clock(), acknowledged_by=acknowledged_by)
        logger.info("Acknowledged %d of %d alerts", count, len(ids))
        return count

    def dismiss(self, alert_id: int) -> None:
        if not self._alerts.delete(int(alert_id)):
            raise NotFoundError(f"Alert {alert_id} not found")

    def get_config(self) -> AlertConfig:
        return self._configs.get() or self._default_config

    def update_config(self, changes: Mapping[str, Any]) -> AlertConfig:
        config = merge_config(self.get_config(), changes)
        self._configs.save(config)
        logger.info("Alert configuration updated: %s", ", ".join(sorted(changes)) or "-")
        return config

    def _require_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def _classify_student(
        self,
        classifier: AlertClassifier,
        student: Student,
        records: Sequence[AttendanceRecord],
        *,
        now: datetime,
    ) -> list[AttendanceAlert]:
        alerts = classifier.classify(student, records, now=now)
        for subject_id, subject_records in _group_by_subject(records).items():
            subject_name = next((r.subject_name for r in subject_records if r.subject_name), None)
            alerts.extend(
                a
                for a in classifier.classify(
                    student, subject_records, now=now, subject_id=subject_id, subject_name=subject_name
                )
                if a.type != AlertType.PATTERN_WARNING
            )
        return alerts

    def analyze_student(self, student_id: int, *, config: Optional[AlertConfig] = None) -> StudentAttendanceAnalysis:
        config = config or self.get_config()
        student = self._require_student(student_id)
        records = list(self._attendance.list_for_student(student.student_id))
        now = self._clock()

        subjects = []
        for subject_id, subject_records in _group_by_subject(records).items():
            subjects.append(
                SubjectAttendance(
                    subject_id=subject_id,
                    subject_name=next((r.subject_name for r in subject_records if r.subject_name), ""),
                    attendance_rate=calculate_attendance_rate(subject_records),
                    consecutive_absences=detect_consecutive_absences(subject_records, config.consecutive_absence_threshold).count,
                )
            )

        return StudentAttendanceAnalysis(
            student_id=student.student_id,
            student_name=student.full_name,
            student_number=student.student_number,
            guardian_email=student.guardian_email,
            overall_rate=calculate_attendance_rate(records),
            consecutive_absences=detect_consecutive_absences(records, config.consecutive_absence_threshold).count,
            last_present_date=last_attended_date(records),
            alerts=self._classify_student(AlertClassifier(config), student, records, now=now),
            subjects=subjects,
        )

    def get_consecutive_absences(self, threshold: int = DEFAULT_CONSECUTIVE_ABSENCE_THRESHOLD) -> list[dict]:
        out: list[dict] = []
        for student in self._students.list_active():
            records = self._attendance.list_for_student(student.student_id)
            result = detect_consecutive_absences(records, threshold)
            if result.count == 0 or result.count < threshold:
                continue

            subjects: list[str] = []
            for r in trailing_absences(records):
                if r.subject_name and r.subject_name not in subjects:
                    subjects.append(r.subject_name)

            out.append(
                {
                    "student_id": student.student_id,
                    "student_name": student.full_name,
                    "consecutive_days": result.count,
                    "start_date": result.start_date,
                    "subjects": subjects,
                }
            )

        out.sort(key=lambda x: x["consecutive_days"], reverse=True)
        return out

    def get_low_attendance(self, threshold: int = DEFAULT_LOW_ATTENDANCE_THRESHOLD) -> list[dict]:
        attended_values = {s.value for s in ATTENDED_STATUSES}
        out: list[dict] = []
        for student in self._students.list_active():
            records = self._attendance.list_for_student(student.student_id)
            if not records:
                continue
            rate = calculate_attendance_rate(records)
            if rate >= threshold:
                continue
            out.append(
                {
                    "student_id": student.student_id,
                    "student_name": student.full_name,
                    "attendance_rate": rate,
                    "total_classes": len(records),
                    "attended_classes": sum(1 for r in records if r.status.value in attended_values),
                }
            )

        out.sort(key=lambda x: x["attendance_rate"])
        return out

    def run_scan(self) -> ScanResult:
        config = self.get_config()
        classifier = AlertClassifier(config)
        now = self._clock()

        scanned = 0
        created = 0
        for student in self._students.list_active():
            scanned += 1
            records = self._attendance.list_for_student(student.student_id)
            for alert in self._classify_student(classifier, student, records, now=now):
                if self._alerts.has_open_alert(
                    student_id=alert.student_id, alert_type=alert.type, subject_id=alert.subject_id
                ):
                    continue
                alert_id = self._alerts.create(alert)
                created += 1
                if config.auto_send_email and config.email_recipients:
                    try:
                        self._notify(alert, alert_id=alert_id, student=student, recipients=config.email_recipients, strict=False)
                    except NotificationError as e:
                        logger.warning("Alert %s stored but notification failed: %s", alert_id, e)

        logger.info("Alert scan finished: %d new alerts from %d students", created, scanned)
        return ScanResult(new_alerts=created, scanned_students=scanned)

    def send_alert_email(self, alert_id: int, recipients: Sequence[Any]) -> list[str]:
        parsed = parse_recipients(recipients)
        if not parsed:
            raise ValidationError("At least one recipient is required")
        alert = self._require_alert(alert_id)
        student = self._require_student(alert.student_id)
        return self._notify(alert, alert_id=alert.alert_id, student=student, recipients=parsed, strict=True)

    def _address_for(self, recipient: Recipient, student: Student) -> Optional[str]:
        if recipient == Recipient.GUARDIAN:
            return student.guardian_email
        if recipient == Recipient.STUDENT:
            return student.email
        return self._admin_email

    def _notify(
        self,
        alert: AttendanceAlert,
        *,
        alert_id: Optional[int],
        student: Student,
        recipients: Sequence[Recipient],
        strict: bool,
    ) -> list[str]:
        addresses: list[str] = []
        for recipient in recipients:
            address = self._address_for(recipient, student)
            if not address:
                logger.warning("Alert %s: no %s email for student %s", alert_id, recipient.value, student.student_id)
                continue
            if address not in addresses:
                addresses.append(address)

        if not addresses:
            if strict:
                raise ValidationError("No email address available for the selected recipients")
            return []

        subject = f"Attendance alert: {alert.student_name}"
        body = _notification_body(alert)
        for address in addresses:
            self._notifier.send(to=address, subject=subject, body=body)
        logger.info("Alert %s sent to %d recipient(s)", alert_id, len(addresses))
        return addresses


def _notification_body(alert: AttendanceAlert) -> str:
    lines = [alert.message, ""]
    lines.append(f"Student: {alert.student_name} ({alert.student_number})")
    if alert.subject_name:
        lines.append(f"Subject: {alert.subject_name}")
    d = alert.details
    if d.consecutive_days is not None:
        lines.append(f"Consecutive absences: {d.consecutive_days}")
    if d.start_date and d.end_date:
        lines.append(f"Period: {d.start_date} to {d.end_date}")
    if d.attendance_rate is not None:
        lines.append(f"Attendance rate: {d.attendance_rate}%")
    if d.late_count is not None:
        lines.append(f"Late arrivals: {d.late_count}")
    return "\n".join(lines)
