"""Run the alert scan outside Flask (e.g. from cron after attendance is marked)."""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_alerts.attendance_alerts.container import build_container
from src.attendance_alerts.attendance_alerts.main import configure_logging

logger = logging.getLogger("run_alert_scan")


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=settings.DB_CONFIG,
        smtp_config=getattr(settings, "SMTP_CONFIG", None),
        admin_email=getattr(settings, "ADMIN_EMAIL", None),
        alert_defaults=getattr(settings, "ALERT_DEFAULTS", None),
    )
    result = container.alert_service.run_scan()
    logger.info("Scan complete: %d new alerts from %d students", result.new_alerts, result.scanned_students)
    return 0


if __name__ == "__main__":
    sys.exit(main())
