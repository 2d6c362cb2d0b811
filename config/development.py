import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_alerts"),
}

# Empty SMTP host => notifications are written to the log instead of mailed
SMTP_CONFIG = {
    "host": os.getenv("SMTP_HOST", ""),
    "port": int(os.getenv("SMTP_PORT", "587")),
    "user": os.getenv("SMTP_USER", ""),
    "password": os.getenv("SMTP_PASSWORD", ""),
    "from_email": os.getenv("SMTP_FROM", ""),
    "use_tls": bool(int(os.getenv("SMTP_USE_TLS", "1"))),
}
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")

# Used until an admin saves settings through PUT /alerts/config
ALERT_DEFAULTS = {
    "consecutive_absence_threshold": int(os.getenv("ALERT_CONSECUTIVE_THRESHOLD", "3")),
    "low_attendance_threshold": int(os.getenv("ALERT_LOW_ATTENDANCE_THRESHOLD", "80")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
