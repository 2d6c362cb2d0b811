from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AlertSeverity, AlertType, Recipient
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .config import AlertConfig
from .model import AlertDetails, AttendanceAlert
from .repository import AlertConfigRepository, AlertRepository

_ALERT_COLUMNS = """
    alert_id, alert_type, severity, student_id, student_name, student_number,
    subject_id, subject_name, message, consecutive_days, attendance_rate,
    threshold_value, start_date, end_date, late_count, acknowledged,
    created_at, acknowledged_at, acknowledged_by
"""


def _opt_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def _to_alert(r: Dict[str, Any]) -> AttendanceAlert:
    return AttendanceAlert(
        alert_id=int(r["alert_id"]),
        type=AlertType(r["alert_type"]),
        severity=AlertSeverity(r["severity"]),
        student_id=int(r["student_id"]),
        student_name=str(r["student_name"]),
        student_number=str(r["student_number"]),
        subject_id=_opt_int(r.get("subject_id")),
        subject_name=r.get("subject_name"),
        message=str(r["message"]),
        details=AlertDetails(
            consecutive_days=_opt_int(r.get("consecutive_days")),
            attendance_rate=_opt_int(r.get("attendance_rate")),
            threshold=_opt_int(r.get("threshold_value")),
            start_date=r.get("start_date"),
            end_date=r.get("end_date"),
            late_count=_opt_int(r.get("late_count")),
        ),
        acknowledged=bool(r["acknowledged"]),
        created_at=r["created_at"],
        acknowledged_at=r.get("acknowledged_at"),
        acknowledged_by=r.get("acknowledged_by"),
    )


class MySQLAlertRepository(AlertRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        where: list[str] = []
        params: list[Any] = []
        if alert_type is not None:
            where.append("alert_type=%s")
            params.append(alert_type.value)
        if severity is not None:
            where.append("severity=%s")
            params.append(severity.value)
        if acknowledged is not None:
            where.append("acknowledged=%s")
            params.append(1 if acknowledged else 0)
        if student_id is not None:
            where.append("student_id=%s")
            params.append(int(student_id))
        if subject_id is not None:
            where.append("subject_id=%s")
            params.append(int(subject_id))

        sql = f"SELECT {_ALERT_COLUMNS} FROM attendance_alerts"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY created_at DESC, alert_id DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_alert(r) for r in fetchall(cur)]

    def get_by_id(self, alert_id: int) -> Optional[AttendanceAlert]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ALERT_COLUMNS} FROM attendance_alerts WHERE alert_id=%s", (int(alert_id),))
            r = fetchone(cur)
            return _to_alert(r) if r else None

    def create(self, alert: AttendanceAlert) -> int:
        d = alert.details
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_alerts(
                    alert_type, severity, student_id, student_name, student_number,
                    subject_id, subject_name, message, consecutive_days, attendance_rate,
                    threshold_value, start_date, end_date, late_count, acknowledged, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    alert.type.value,
                    alert.severity.value,
                    alert.student_id,
                    alert.student_name,
                    alert.student_number,
                    alert.subject_id,
                    alert.subject_name,
                    alert.message,
                    d.consecutive_days,
                    d.attendance_rate,
                    d.threshold,
                    d.start_date,
                    d.end_date,
                    d.late_count,
                    1 if alert.acknowledged else 0,
                    alert.created_at,
                ),
            )
            return int(cur.lastrowid)

    def has_open_alert(self, *, student_id: int, alert_type: AlertType, subject_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 FROM attendance_alerts
                WHERE student_id=%s AND alert_type=%s AND subject_id <=> %s AND acknowledged=0
                LIMIT 1
                """,
                (int(student_id), alert_type.value, subject_id),
            )
            return fetchone(cur) is not None

    def acknowledge(self, *, alert_ids: Sequence[int], acknowledged_at: datetime, acknowledged_by: Optional[str]) -> int:
        ids = [int(i) for i in alert_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance_alerts
                SET acknowledged=1, acknowledged_at=%s, acknowledged_by=%s
                WHERE acknowledged=0 AND alert_id IN ({in_clause(ids)})
                """,
                (acknowledged_at, acknowledged_by, *ids),
            )
            return int(cur.rowcount)

    def delete(self, alert_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_alerts WHERE alert_id=%s", (int(alert_id),))
            return cur.rowcount > 0


class MySQLAlertConfigRepository(AlertConfigRepository):
    """Single-row settings table (config_id = 1)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[AlertConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT consecutive_absence_threshold, low_attendance_threshold,
                       enable_consecutive_alerts, enable_low_attendance_alerts, enable_pattern_alerts,
                       auto_send_email, email_recipients, late_pattern_threshold, pattern_window_days
                FROM alert_config
                WHERE config_id=1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            recipients = [v for v in str(r.get("email_recipients") or "").split(",") if v]
            return AlertConfig(
                consecutive_absence_threshold=int(r["consecutive_absence_threshold"]),
                low_attendance_threshold=int(r["low_attendance_threshold"]),
                enable_consecutive_alerts=bool(r["enable_consecutive_alerts"]),
                enable_low_attendance_alerts=bool(r["enable_low_attendance_alerts"]),
                enable_pattern_alerts=bool(r["enable_pattern_alerts"]),
                auto_send_email=bool(r["auto_send_email"]),
                email_recipients=tuple(Recipient(v) for v in recipients),
                late_pattern_threshold=int(r["late_pattern_threshold"]),
                pattern_window_days=int(r["pattern_window_days"]),
            )

    def save(self, config: AlertConfig) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO alert_config(
                    config_id, consecutive_absence_threshold, low_attendance_threshold,
                    enable_consecutive_alerts, enable_low_attendance_alerts, enable_pattern_alerts,
                    auto_send_email, email_recipients, late_pattern_threshold, pattern_window_days
                )
                VALUES(1,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    consecutive_absence_threshold=VALUES(consecutive_absence_threshold),
                    low_attendance_threshold=VALUES(low_attendance_threshold),
                    enable_consecutive_alerts=VALUES(enable_consecutive_alerts),
                    enable_low_attendance_alerts=VALUES(enable_low_attendance_alerts),
                    enable_pattern_alerts=VALUES(enable_pattern_alerts),
                    auto_send_email=VALUES(auto_send_email),
                    email_recipients=VALUES(email_recipients),
                    late_pattern_threshold=VALUES(late_pattern_threshold),
                    pattern_window_days=VALUES(pattern_window_days)
                """,
                (
                    config.consecutive_absence_threshold,
                    config.low_attendance_threshold,
                    int(config.enable_consecutive_alerts),
                    int(config.enable_low_attendance_alerts),
                    int(config.enable_pattern_alerts),
                    int(config.auto_send_email),
                    ",".join(r.value for r in config.email_recipients),
                    config.late_pattern_threshold,
                    config.pattern_window_days,
                ),
            )
