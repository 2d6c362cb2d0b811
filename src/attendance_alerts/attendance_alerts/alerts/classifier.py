from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.enums import AlertType
from ..students.model import Student
from .config import AlertConfig
from .detection import calculate_attendance_rate, detect_consecutive_absences
from .factory import AlertRuleFactory
from .messages import generate_alert_message
from .model import AttendanceAlert
from .rules.base import AlertDecision, RuleContext


class AlertClassifier:
    def __init__(self, config: AlertConfig, *, rule_factory: AlertRuleFactory | None = None):
        self._config = config
        self._rules = (rule_factory or AlertRuleFactory()).for_config(config)

    def context_for(self, records: Sequence[AttendanceRecord], *, now: datetime) -> RuleContext:
        return RuleContext(
            records=records,
            consecutive=detect_consecutive_absences(records, self._config.consecutive_absence_threshold),
            attendance_rate=calculate_attendance_rate(records),
            now=now,
        )

    def classify(
        self,
        student: Student,
        records: Sequence[AttendanceRecord],
        *,
        now: datetime,
        subject_id: Optional[int] = None,
        subject_name: Optional[str] = None,
    ) -> list[AttendanceAlert]:
        context = self.context_for(records, now=now)
        alerts: list[AttendanceAlert] = []
        for rule in self._rules:
            decision = rule.evaluate(context)
            if decision:
                alerts.append(self._to_alert(decision, student, now=now, subject_id=subject_id, subject_name=subject_name))
        return alerts

    def _to_alert(
        self,
        decision: AlertDecision,
        student: Student,
        *,
        now: datetime,
        subject_id: Optional[int],
        subject_name: Optional[str],
    ) -> AttendanceAlert:
        d = decision.details
        message = generate_alert_message(
            decision.type,
            student.full_name,
            consecutive_days=d.consecutive_days,
            attendance_rate=d.attendance_rate,
            threshold=d.threshold,
            subject_name=subject_name if decision.type != AlertType.PATTERN_WARNING else None,
        )
        return AttendanceAlert(
            type=decision.type,
            severity=decision.severity,
            student_id=student.student_id,
            student_name=student.full_name,
            student_number=student.student_number,
            message=message,
            details=d,
            created_at=now,
            subject_id=subject_id,
            subject_name=subject_name,
        )
