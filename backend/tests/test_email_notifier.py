# backend/tests/test_email_notifier.py
import pytest

from birdsurvey.config import Settings
from birdsurvey.services.notify.email import EmailNotifier, NotificationModel, SmtpTransport, build_notifier


class CollectingTransport:
    def __init__(self):
        self.messages = []

    def deliver(self, message):
        self.messages.append(message)


def test_send_builds_plain_text_message():
    transport = CollectingTransport()
    notifier = EmailNotifier(transport)

    notifier.send(
        NotificationModel(
            to="reviewer@example.org",
            subject="Survey ready",
            body="Please review.",
            from_email="surveys@example.org",
            from_name="Bird Survey",
        )
    )

    (message,) = transport.messages
    assert message["To"] == "reviewer@example.org"
    assert message["From"] == "Bird Survey <surveys@example.org>"
    assert message["Subject"] == "Survey ready"
    assert message.get_content().strip() == "Please review."


def test_notifier_requires_transport():
    with pytest.raises(ValueError):
        EmailNotifier(None)


def test_build_notifier_is_disabled_without_smtp_host():
    assert build_notifier(Settings(smtp_host=None)) is None


def test_build_notifier_uses_smtp_settings():
    notifier = build_notifier(Settings(smtp_host="mail.example.org", smtp_port=2525, smtp_username="svc"))

    transport = notifier._transport
    assert isinstance(transport, SmtpTransport)
    assert (transport.host, transport.port, transport.username) == ("mail.example.org", 2525, "svc")
