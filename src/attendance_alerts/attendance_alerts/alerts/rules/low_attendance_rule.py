from __future__ import annotations

from typing import Optional

from ...core.enums import AlertSeverity, AlertType
from ..detection import is_low_attendance
from ..model import AlertDetails
from .base import AlertDecision, AlertRule, RuleContext


class LowAttendanceRule(AlertRule):
    """Warning: rate below threshold while no critical absence run is active.

    ``critical_run_threshold`` is None when consecutive-absence alerts are
    switched off; nothing is suppressed then.
    """

    def __init__(self, threshold: int, *, critical_run_threshold: Optional[int] = None):
        self._threshold = int(threshold)
        self._critical_run_threshold = critical_run_threshold

    def _has_critical_run(self, context: RuleContext) -> bool:
        run = context.consecutive.count
        return self._critical_run_threshold is not None and run > 0 and run >= self._critical_run_threshold

    def evaluate(self, context: RuleContext) -> Optional[AlertDecision]:
        if not context.records or self._has_critical_run(context):
            return None
        if not is_low_attendance(context.attendance_rate, self._threshold):
            return None
        return AlertDecision(
            type=AlertType.LOW_ATTENDANCE,
            severity=AlertSeverity.WARNING,
            details=AlertDetails(attendance_rate=context.attendance_rate, threshold=self._threshold),
        )
