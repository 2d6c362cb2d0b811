from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ...core.enums import AlertSeverity, AlertType, AttendanceStatus
from ..detection import record_date, status_of
from ..model import AlertDetails
from .base import AlertDecision, AlertRule, RuleContext


class LatePatternRule(AlertRule):
    """Info: repeated late arrivals inside the recent window."""

    def __init__(self, late_threshold: int, window_days: int):
        self._late_threshold = int(late_threshold)
        self._window_days = int(window_days)

    def evaluate(self, context: RuleContext) -> Optional[AlertDecision]:
        today = context.now.date()
        cutoff = today - timedelta(days=self._window_days)

        late_count = 0
        for r in context.records:
            if status_of(r) != AttendanceStatus.LATE.value:
                continue
            d = record_date(r)
            if d and cutoff <= d <= today:
                late_count += 1

        if late_count < self._late_threshold:
            return None
        return AlertDecision(
            type=AlertType.PATTERN_WARNING,
            severity=AlertSeverity.INFO,
            details=AlertDetails(late_count=late_count, threshold=self._late_threshold),
        )
