from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping

from ..common.validators import require_bool, require_int
from ..core.constants import (
    DEFAULT_CONSECUTIVE_ABSENCE_THRESHOLD,
    DEFAULT_LATE_PATTERN_THRESHOLD,
    DEFAULT_LOW_ATTENDANCE_THRESHOLD,
    DEFAULT_PATTERN_WINDOW_DAYS,
)
from ..core.enums import Recipient
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AlertConfig:
    """Thresholds and switches for alert generation.

    Passed explicitly to the classifier and the service; the stored copy
    lives in the ``alert_config`` table.
    """

    consecutive_absence_threshold: int = DEFAULT_CONSECUTIVE_ABSENCE_THRESHOLD
    low_attendance_threshold: int = DEFAULT_LOW_ATTENDANCE_THRESHOLD
    enable_consecutive_alerts: bool = True
    enable_low_attendance_alerts: bool = True
    enable_pattern_alerts: bool = True
    auto_send_email: bool = False
    email_recipients: tuple[Recipient, ...] = (Recipient.GUARDIAN,)
    late_pattern_threshold: int = DEFAULT_LATE_PATTERN_THRESHOLD
    pattern_window_days: int = DEFAULT_PATTERN_WINDOW_DAYS

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["email_recipients"] = [r.value for r in self.email_recipients]
        return data


DEFAULT_ALERT_CONFIG = AlertConfig()

_INT_LIMITS = {
    "consecutive_absence_threshold": (1, None),
    "low_attendance_threshold": (0, 100),
    "late_pattern_threshold": (1, None),
    "pattern_window_days": (1, 366),
}
_BOOL_FIELDS = {
    "enable_consecutive_alerts",
    "enable_low_attendance_alerts",
    "enable_pattern_alerts",
    "auto_send_email",
}


def parse_recipients(values: Any) -> tuple[Recipient, ...]:
    if isinstance(values, str) or not hasattr(values, "__iter__"):
        raise ValidationError("email_recipients must be a list")
    out: list[Recipient] = []
    for v in values:
        try:
            r = Recipient(str(v).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown recipient: {v!r}")
        if r not in out:
            out.append(r)
    return tuple(out)


def merge_config(base: AlertConfig, changes: Mapping[str, Any]) -> AlertConfig:
    """Apply a partial update, validating every changed field."""
    known = {f.name for f in fields(AlertConfig)}
    unknown = sorted(set(changes) - known)
    if unknown:
        raise ValidationError(f"Unknown alert setting(s): {', '.join(unknown)}")

    cleaned: dict[str, Any] = {}
    for name, value in changes.items():
        if name in _INT_LIMITS:
            lo, hi = _INT_LIMITS[name]
            cleaned[name] = require_int(value, name, min_value=lo, max_value=hi)
        elif name in _BOOL_FIELDS:
            cleaned[name] = require_bool(value, name)
        else:
            cleaned[name] = parse_recipients(value)
    return replace(base, **cleaned)


def config_from_settings(settings: Mapping[str, Any] | None) -> AlertConfig:
    return merge_config(DEFAULT_ALERT_CONFIG, settings or {})
