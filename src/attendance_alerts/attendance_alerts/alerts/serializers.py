"""camelCase JSON shapes used by the admin console."""

from __future__ import annotations

import re
from dataclasses import asdict
from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError
from .config import AlertConfig
from .model import AlertSummary, AttendanceAlert, StudentAttendanceAnalysis

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub(lambda m: "_" + m.group(1).lower(), name)


def camelize(data: Mapping[str, Any]) -> dict[str, Any]:
    return {to_camel(k): v for k, v in data.items()}


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def alert_to_json(alert: AttendanceAlert) -> dict[str, Any]:
    details = {to_camel(k): v for k, v in asdict(alert.details).items() if v is not None}
    return {
        "id": alert.alert_id,
        "type": alert.type.value,
        "severity": alert.severity.value,
        "studentId": alert.student_id,
        "studentName": alert.student_name,
        "studentNumber": alert.student_number,
        "subjectId": alert.subject_id,
        "subjectName": alert.subject_name,
        "message": alert.message,
        "details": details,
        "acknowledged": alert.acknowledged,
        "createdAt": _iso(alert.created_at),
        "acknowledgedAt": _iso(alert.acknowledged_at),
        "acknowledgedBy": alert.acknowledged_by,
    }


def summary_to_json(summary: AlertSummary) -> dict[str, Any]:
    return {
        "total": summary.total,
        "critical": summary.critical,
        "warning": summary.warning,
        "unacknowledged": summary.unacknowledged,
        "byType": {t.value: n for t, n in summary.by_type.items()},
    }


def analysis_to_json(analysis: StudentAttendanceAnalysis) -> dict[str, Any]:
    return {
        "studentId": analysis.student_id,
        "studentName": analysis.student_name,
        "studentNumber": analysis.student_number,
        "guardianEmail": analysis.guardian_email,
        "overallRate": analysis.overall_rate,
        "consecutiveAbsences": analysis.consecutive_absences,
        "lastPresentDate": analysis.last_present_date,
        "alerts": [alert_to_json(a) for a in analysis.alerts],
        "subjects": [camelize(asdict(s)) for s in analysis.subjects],
    }


def config_to_json(config: AlertConfig) -> dict[str, Any]:
    return camelize(config.to_dict())


def config_changes_from_json(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return {to_snake(k): v for k, v in payload.items()}
