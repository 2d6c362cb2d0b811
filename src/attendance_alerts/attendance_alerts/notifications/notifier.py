from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(self, *, to: str, subject: str, body: str) -> None:
        """Deliver one plain-text message; raise NotificationError on failure."""
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Development notifier: writes messages to the log instead of mailing."""

    def send(self, *, to: str, subject: str, body: str) -> None:
        logger.info("Notification to %s: %s\n%s", to, subject, body)
