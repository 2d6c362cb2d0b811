from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AlertSeverity, AlertType
from .config import AlertConfig
from .model import AttendanceAlert


class AlertRepository(Protocol):
    def list_alerts(
        self,
        *,
        alert_type: Optional[AlertType] = None,
        severity: Optional[AlertSeverity] = None,
        acknowledged: Optional[bool] = None,
        student_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceAlert]:
        raise NotImplementedError

    def get_by_id(self, alert_id: int) -> Optional[AttendanceAlert]:
        raise NotImplementedError

    def create(self, alert: AttendanceAlert) -> int:
        raise NotImplementedError

    def has_open_alert(self, *, student_id: int, alert_type: AlertType, subject_id: Optional[int]) -> bool:
        """True when an unacknowledged alert of this type already exists."""

        raise NotImplementedError

    def acknowledge(self, *, alert_ids: Sequence[int], acknowledged_at: datetime, acknowledged_by: Optional[str]) -> int:
        """Mark alerts acknowledged; returns how many rows changed."""

        raise NotImplementedError

    def delete(self, alert_id: int) -> bool:
        raise NotImplementedError


class AlertConfigRepository(Protocol):
    def get(self) -> Optional[AlertConfig]:
        raise NotImplementedError

    def save(self, config: AlertConfig) -> None:
        raise NotImplementedError
