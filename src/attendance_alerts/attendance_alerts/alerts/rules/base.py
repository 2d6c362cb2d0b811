from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ...attendance.model import AttendanceRecord
from ...core.enums import AlertSeverity, AlertType
from ..model import AlertDetails, ConsecutiveAbsenceResult


@dataclass(frozen=True)
class RuleContext:
    """Metrics computed once per student (or student+subject) and shared by rules."""

    records: Sequence[AttendanceRecord]
    consecutive: ConsecutiveAbsenceResult
    attendance_rate: int
    now: datetime


@dataclass(frozen=True)
class AlertDecision:
    type: AlertType
    severity: AlertSeverity
    details: AlertDetails


class AlertRule(ABC):
    """Strategy Pattern: one way of turning metrics into an alert."""

    @abstractmethod
    def evaluate(self, context: RuleContext) -> Optional[AlertDecision]:
        raise NotImplementedError
