from __future__ import annotations

from typing import Optional

from ..core.enums import AlertType


def generate_alert_message(
    alert_type: AlertType | str,
    student_name: str,
    *,
    consecutive_days: Optional[int] = None,
    attendance_rate: Optional[int] = None,
    threshold: Optional[int] = None,
    subject_name: Optional[str] = None,
) -> str:
    """Human-readable alert text used by the alert center and emails."""
    in_subject = f" in {subject_name}" if subject_name else ""

    if alert_type == AlertType.CONSECUTIVE_ABSENCE:
        return (
            f"{student_name} has been absent for {consecutive_days} consecutive days{in_subject}. "
            "Immediate attention required."
        )
    if alert_type == AlertType.LOW_ATTENDANCE:
        return (
            f"{student_name}'s attendance rate is {attendance_rate}%{in_subject}, "
            f"below the {threshold}% threshold."
        )
    if alert_type == AlertType.PATTERN_WARNING:
        return f"{student_name} shows irregular attendance patterns. Review recommended."
    return f"Attendance alert for {student_name}"
