# -*- coding: utf-8 -*-
"""
Notifier tests.

SMTP is replaced by an in-memory fake; nothing leaves the process.
"""

import smtplib

import pytest

from webgate.configuration import Settings
from webgate.services.notifier import Notifier, NotifierError, render_template


class FakeSMTP:
    instances = []
    fail_login = False

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.started_tls = False
        self.credentials = None
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, username, password):
        if FakeSMTP.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")
        self.credentials = (username, password)

    def send_message(self, message):
        self.messages.append(message)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_login = False
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _enabled_settings(**overrides):
    values = dict(
        EMAIL_ENABLED=True,
        SMTP_HOST="mail.example.com",
        SMTP_PORT=2525,
        SMTP_USERNAME="bot@example.com",
        SMTP_PASSWORD="smtp-secret",
    )
    values.update(overrides)
    return Settings(**values)


class TestRenderTemplate:
    def test_substitutes_known_keys(self):
        assert render_template("Hi {ign} ({type})", {"ign": "steve", "type": "member"}) == "Hi steve (member)"

    def test_none_becomes_na(self):
        assert render_template("Telegram: {telegram}", {"telegram": None}) == "Telegram: N/A"

    def test_unknown_keys_are_left(self):
        assert render_template("Hello {name}", {}) == "Hello {name}"


class TestSend:
    def test_disabled_sends_nothing(self, fake_smtp):
        notifier = Notifier(Settings(EMAIL_ENABLED=False))

        assert notifier.send("a@example.com", "Subject", "Body") is False
        assert fake_smtp.instances == []

    def test_enabled_sends_through_smtp(self, fake_smtp):
        notifier = Notifier(_enabled_settings(SMTP_FROM="noreply@example.com"))

        assert notifier.send("a@example.com", "Subject", "Body") is True

        smtp = fake_smtp.instances[0]
        assert (smtp.host, smtp.port) == ("mail.example.com", 2525)
        assert smtp.started_tls is True
        assert smtp.credentials == ("bot@example.com", "smtp-secret")
        message = smtp.messages[0]
        assert message["To"] == "a@example.com"
        assert message["From"] == "noreply@example.com"
        assert message["Subject"] == "Subject"
        assert message.get_content().strip() == "Body"

    def test_smtp_failure_raises(self, fake_smtp):
        fake_smtp.fail_login = True

        with pytest.raises(NotifierError):
            Notifier(_enabled_settings()).send("a@example.com", "Subject", "Body")

    def test_send_template_renders_subject_and_body(self, fake_smtp):
        notifier = Notifier(_enabled_settings())

        notifier.send_template("a@example.com", "denial", {"ign": "steve", "denied_by": "mod", "reason": "spam"})

        message = fake_smtp.instances[0].messages[0]
        assert message["Subject"] == "Registration denied"
        assert "Reason: spam" in message.get_content()

    def test_unknown_template_raises(self, fake_smtp):
        with pytest.raises(NotifierError):
            Notifier(_enabled_settings()).send_template("a@example.com", "missing", {})


class TestDeliver:
    def test_deliver_swallows_failures(self, fake_smtp):
        fake_smtp.fail_login = True
        notifier = Notifier(_enabled_settings())

        assert notifier.deliver("a@example.com", "Subject", "Body") is False
        assert notifier.deliver_template("a@example.com", "acceptance", {"ign": "x"}) is False
        assert notifier.deliver_template("a@example.com", "missing", {}) is False

    def test_fanout_counts_sent_messages(self, fake_smtp):
        notifier = Notifier(_enabled_settings())

        sent = notifier.deliver_fanout(
            ["ops@example.com", "mod@example.com"], "admin_notification", {"ign": "steve"}
        )

        assert sent == 2
        assert [m["To"] for s in fake_smtp.instances for m in s.messages] == [
            "ops@example.com",
            "mod@example.com",
        ]
        assert fake_smtp.instances[0].messages[0]["Subject"] == "New registration: steve"

    def test_line_breaks_in_headers_are_reported_not_raised(self, fake_smtp):
        notifier = Notifier(_enabled_settings())

        with pytest.raises(NotifierError):
            notifier.send_template(
                "ops@example.com", "admin_notification", {"ign": "evil\nBcc: victim@example.com"}
            )
        assert notifier.deliver_template(
            "ops@example.com", "admin_notification", {"ign": "evil\nBcc: victim@example.com"}
        ) is False
        assert notifier.deliver("a@example.com\r\nBcc: victim@example.com", "Subject", "Body") is False
        assert fake_smtp.instances == []

    def test_fanout_continues_after_bad_address(self, fake_smtp):
        notifier = Notifier(_enabled_settings())

        sent = notifier.deliver_fanout(
            ["bad\n@example.com", "mod@example.com"], "admin_notification", {"ign": "steve"}
        )

        assert sent == 1
        assert fake_smtp.instances[0].messages[0]["To"] == "mod@example.com"
