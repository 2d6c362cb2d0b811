from __future__ import annotations

from dataclasses import dataclass

from .config import AlertConfig
from .rules.base import AlertRule
from .rules.consecutive_absence_rule import ConsecutiveAbsenceRule
from .rules.low_attendance_rule import LowAttendanceRule
from .rules.pattern_rule import LatePatternRule


@dataclass
class AlertRuleFactory:
    """Factory Pattern: build the enabled rules for a config."""

    def for_config(self, config: AlertConfig) -> list[AlertRule]:
        rules: list[AlertRule] = []
        if config.enable_consecutive_alerts:
            rules.append(ConsecutiveAbsenceRule(config.consecutive_absence_threshold))
        if config.enable_low_attendance_alerts:
            rules.append(
                LowAttendanceRule(
                    config.low_attendance_threshold,
                    critical_run_threshold=config.consecutive_absence_threshold if config.enable_consecutive_alerts else None,
                )
            )
        if config.enable_pattern_alerts:
            rules.append(LatePatternRule(config.late_pattern_threshold, config.pattern_window_days))
        return rules
