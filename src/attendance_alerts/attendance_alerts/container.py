from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .alerts.config import config_from_settings
from .alerts.mysql_alert_repository import MySQLAlertConfigRepository, MySQLAlertRepository
from .alerts.repository import AlertConfigRepository, AlertRepository
from .alerts.service import AlertService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .database.connection import DatabaseConnection, DBConfig
from .notifications.notifier import LoggingNotifier, Notifier
from .notifications.smtp_notifier import SMTPConfig, SMTPNotifier
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    students_repo: StudentRepository
    attendance_repo: AttendanceRepository
    alerts_repo: AlertRepository
    alert_config_repo: AlertConfigRepository
    notifier: Notifier

    alert_service: AlertService


def build_notifier(smtp_config: Optional[Mapping[str, Any]]) -> Notifier:
    if smtp_config and smtp_config.get("host"):
        return SMTPNotifier(SMTPConfig.from_dict(dict(smtp_config)))
    return LoggingNotifier()


def build_container(
    *,
    db_config: dict,
    smtp_config: Optional[Mapping[str, Any]] = None,
    admin_email: Optional[str] = None,
    alert_defaults: Optional[Mapping[str, Any]] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    students_repo = MySQLStudentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    alerts_repo = MySQLAlertRepository(conn)
    alert_config_repo = MySQLAlertConfigRepository(conn)
    notifier = build_notifier(smtp_config)

    alert_service = AlertService(
        alerts_repo,
        alert_config_repo,
        students_repo,
        attendance_repo,
        notifier=notifier,
        admin_email=admin_email,
        default_config=config_from_settings(alert_defaults),
    )

    return Container(
        conn=conn,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        alerts_repo=alerts_repo,
        alert_config_repo=alert_config_repo,
        notifier=notifier,
        alert_service=alert_service,
    )
