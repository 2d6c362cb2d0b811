import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_alerts"),
}

SMTP_CONFIG = {
    "host": os.getenv("SMTP_HOST", ""),
    "port": int(os.getenv("SMTP_PORT", "587")),
    "user": os.getenv("SMTP_USER", ""),
    "password": os.getenv("SMTP_PASSWORD", ""),
    "from_email": os.getenv("SMTP_FROM", ""),
    "use_tls": bool(int(os.getenv("SMTP_USE_TLS", "1"))),
}
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")

ALERT_DEFAULTS = {
    "consecutive_absence_threshold": int(os.getenv("ALERT_CONSECUTIVE_THRESHOLD", "3")),
    "low_attendance_threshold": int(os.getenv("ALERT_LOW_ATTENDANCE_THRESHOLD", "80")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
