from __future__ import annotations

from typing import Optional

from ...core.enums import AlertSeverity, AlertType
from ..model import AlertDetails
from .base import AlertDecision, AlertRule, RuleContext


class ConsecutiveAbsenceRule(AlertRule):
    """Critical: an active absence run at or above the threshold."""

    def __init__(self, threshold: int):
        self._threshold = int(threshold)

    def evaluate(self, context: RuleContext) -> Optional[AlertDecision]:
        run = context.consecutive
        if run.count == 0 or run.count < self._threshold:
            return None
        return AlertDecision(
            type=AlertType.CONSECUTIVE_ABSENCE,
            severity=AlertSeverity.CRITICAL,
            details=AlertDetails(
                consecutive_days=run.count,
                threshold=self._threshold,
                start_date=run.start_date,
                end_date=run.end_date,
            ),
        )
