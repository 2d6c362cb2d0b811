"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CONSECUTIVE_ABSENCE_THRESHOLD = 3
DEFAULT_LOW_ATTENDANCE_THRESHOLD = 80
DEFAULT_LATE_PATTERN_THRESHOLD = 5
DEFAULT_PATTERN_WINDOW_DAYS = 30
DEFAULT_ALERT_LIST_LIMIT = 200
EMPTY_ATTENDANCE_RATE = 100
