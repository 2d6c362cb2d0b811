from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.validators import require_int
from ..core.enums import AlertSeverity, AlertType
from ..core.exceptions import NotFoundError, NotificationError, ValidationError
from ..container import Container
from .serializers import (
    alert_to_json,
    analysis_to_json,
    camelize,
    config_changes_from_json,
    config_to_json,
    summary_to_json,
)

logger = logging.getLogger(__name__)


def _parse_enum(enum_cls, value: Optional[str], field_name: str):
    if value in (None, ""):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Invalid {field_name}: {value}")


def _parse_bool(value: Optional[str], field_name: str) -> Optional[bool]:
    if value in (None, ""):
        return None
    v = value.strip().lower()
    if v in {"true", "1"}:
        return True
    if v in {"false", "0"}:
        return False
    raise ValidationError(f"Invalid {field_name}: {value}")


def _optional_int_arg(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, ""):
        return None
    return require_int(value, name)


def _json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def register(app: Flask, container: Container) -> None:
    service = container.alert_service

    def json_endpoint(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"error": str(e)}), 400
            except NotFoundError as e:
                return jsonify({"error": str(e)}), 404
            except NotificationError as e:
                return jsonify({"error": str(e)}), 502
            except Exception:
                logger.exception("Unhandled error in %s", request.path)
                return jsonify({"error": "Internal server error"}), 500

        return wrapper

    @app.route("/alerts", methods=["GET"], endpoint="alerts_list")
    @json_endpoint
    def alerts_list():
        alerts = service.get_alerts(
            alert_type=_parse_enum(AlertType, request.args.get("type"), "type"),
            severity=_parse_enum(AlertSeverity, request.args.get("severity"), "severity"),
            acknowledged=_parse_bool(request.args.get("acknowledged"), "acknowledged"),
            student_id=_optional_int_arg("studentId"),
            subject_id=_optional_int_arg("subjectId"),
        )
        return jsonify({"data": [alert_to_json(a) for a in alerts]})

    @app.route("/alerts/summary", methods=["GET"], endpoint="alerts_summary")
    @json_endpoint
    def alerts_summary():
        return jsonify({"data": summary_to_json(service.get_summary())})

    @app.route("/alerts/<int:alert_id>/acknowledge", methods=["PUT"], endpoint="alerts_acknowledge")
    @json_endpoint
    def alerts_acknowledge(alert_id: int):
        body = _json_body()
        service.acknowledge(alert_id, acknowledged_by=body.get("acknowledgedBy"))
        return jsonify({"data": {"id": alert_id, "acknowledged": True}})

    @app.route("/alerts/acknowledge-multiple", methods=["PUT"], endpoint="alerts_acknowledge_multiple")
    @json_endpoint
    def alerts_acknowledge_multiple():
        body = _json_body()
        alert_ids = body.get("alertIds")
        if not isinstance(alert_ids, list):
            raise ValidationError("alertIds must be a list")
        count = service.acknowledge_multiple(alert_ids, acknowledged_by=body.get("acknowledgedBy"))
        return jsonify({"data": {"acknowledged": count}})

    @app.route("/alerts/analyze/student/<int:student_id>", methods=["GET"], endpoint="alerts_analyze_student")
    @json_endpoint
    def alerts_analyze_student(student_id: int):
        return jsonify({"data": analysis_to_json(service.analyze_student(student_id))})

    @app.route("/alerts/consecutive-absences", methods=["GET"], endpoint="alerts_consecutive_absences")
    @json_endpoint
    def alerts_consecutive_absences():
        threshold = _optional_int_arg("threshold")
        rows = service.get_consecutive_absences(threshold if threshold is not None else service.get_config().consecutive_absence_threshold)
        return jsonify({"data": [camelize(r) for r in rows]})

    @app.route("/alerts/low-attendance", methods=["GET"], endpoint="alerts_low_attendance")
    @json_endpoint
    def alerts_low_attendance():
        threshold = _optional_int_arg("threshold")
        rows = service.get_low_attendance(threshold if threshold is not None else service.get_config().low_attendance_threshold)
        return jsonify({"data": [camelize(r) for r in rows]})

    @app.route("/alerts/config", methods=["GET", "PUT"], endpoint="alerts_config")
    @json_endpoint
    def alerts_config():
        if request.method == "PUT":
            config = service.update_config(config_changes_from_json(request.get_json(silent=True)))
        else:
            config = service.get_config()
        return jsonify({"data": config_to_json(config)})

    @app.route("/alerts/scan", methods=["POST"], endpoint="alerts_scan")
    @json_endpoint
    def alerts_scan():
        result = service.run_scan()
        return jsonify({"data": {"newAlerts": result.new_alerts, "scannedStudents": result.scanned_students}})

    @app.route("/alerts/<int:alert_id>/notify", methods=["POST"], endpoint="alerts_notify")
    @json_endpoint
    def alerts_notify(alert_id: int):
        recipients = _json_body().get("recipients")
        if not isinstance(recipients, list):
            raise ValidationError("recipients must be a list")
        sent_to = service.send_alert_email(alert_id, recipients)
        return jsonify({"data": {"sentTo": sent_to}})

    @app.route("/alerts/<int:alert_id>", methods=["DELETE"], endpoint="alerts_dismiss")
    @json_endpoint
    def alerts_dismiss(alert_id: int):
        service.dismiss(alert_id)
        return jsonify({"data": {"id": alert_id, "dismissed": True}})
