from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from ..core.exceptions import NotificationError
from .notifier import Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SMTPConfig:
    host: str
    port: int = 587
    user: str = ""
    password: str = ""
    from_email: str = ""
    from_name: str = "Attendance Alerts"
    use_tls: bool = True
    timeout: float = 10.0

    @classmethod
    def from_dict(cls, smtp_config: dict) -> "SMTPConfig":
        user = str(smtp_config.get("user") or "")
        return cls(
            host=str(smtp_config.get("host") or ""),
            port=int(smtp_config.get("port", 587)),
            user=user,
            password=str(smtp_config.get("password") or ""),
            from_email=str(smtp_config.get("from_email") or user),
            from_name=str(smtp_config.get("from_name") or "Attendance Alerts"),
            use_tls=bool(smtp_config.get("use_tls", True)),
            timeout=float(smtp_config.get("timeout", 10.0)),
        )


class SMTPNotifier(Notifier):
    """Sends each message over a fresh SMTP connection."""

    def __init__(self, config: SMTPConfig, *, smtp_factory=smtplib.SMTP):
        self._config = config
        self._smtp_factory = smtp_factory

    def _build_message(self, *, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f"{self._config.from_name} <{self._config.from_email}>"
        msg["To"] = to
        msg.set_content(body)
        return msg

    def send(self, *, to: str, subject: str, body: str) -> None:
        msg = self._build_message(to=to, subject=subject, body=body)
        try:
            with self._smtp_factory(self._config.host, self._config.port, timeout=self._config.timeout) as smtp:
                if self._config.use_tls:
                    smtp.starttls()
                if self._config.user and self._config.password:
                    smtp.login(self._config.user, self._config.password)
                smtp.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed for %s", self._config.user)
            raise NotificationError("SMTP authentication failed") from e
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to, e)
            raise NotificationError(f"Failed to send email to {to}") from e

        logger.info("Email sent to %s", to)
