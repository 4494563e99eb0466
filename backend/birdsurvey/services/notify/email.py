# backend/birdsurvey/services/notify/email.py
"""E-mail notifications.

``EmailNotifier`` builds the message; delivery is delegated to a transport so
tests (and alternative relays) can swap it out. ``SmtpTransport`` is the
default and talks to the relay configured in settings.
"""

from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional, Protocol

from birdsurvey.config import Settings
from birdsurvey.logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class NotificationModel:
    to: str
    subject: str
    body: str
    from_email: str
    from_name: str = ""


class EmailTransport(Protocol):
    def deliver(self, message: EmailMessage) -> None: ...


class SmtpTransport:
    def __init__(
        self,
        host: str,
        port: int = 587,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)


class EmailNotifier:
    """Adapter for sending plain-text e-mail to individuals."""

    def __init__(self, transport: EmailTransport) -> None:
        if transport is None:
            raise ValueError("transport is required")
        self._transport = transport

    @staticmethod
    def build_message(notification: NotificationModel) -> EmailMessage:
        message = EmailMessage()
        message["To"] = notification.to
        message["From"] = formataddr((notification.from_name, notification.from_email))
        message["Subject"] = notification.subject
        message.set_content(notification.body)
        return message

    def send(self, notification: NotificationModel) -> None:
        message = self.build_message(notification)
        self._transport.deliver(message)
        LOGGER.info("Sent notification '%s' to %s", notification.subject, notification.to)


def build_notifier(settings: Settings) -> Optional[EmailNotifier]:
    """Return a notifier for the configured SMTP relay, or None when unset."""
    if not settings.smtp_host:
        return None
    transport = SmtpTransport(
        settings.smtp_host,
        settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
    )
    return EmailNotifier(transport)
