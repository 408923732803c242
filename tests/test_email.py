# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""SMTP delivery for outgoing mail."""

import smtplib
import threading

from roleplay_server.config import settings
from roleplay_server.services import email


class _FakeSMTP:
    sent: list = []

    def __init__(self, host, port):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        pass

    def sendmail(self, sender, recipients, message):
        self.sent.append(
            {
                "host": self.host,
                "from": sender,
                "to": recipients,
                "message": message,
                "thread": threading.get_ident(),
            }
        )


class _RefusingSMTP(_FakeSMTP):
    def sendmail(self, sender, recipients, message):
        raise smtplib.SMTPRecipientsRefused({recipients[0]: (550, b"no such user")})


async def test_send_email_off_event_loop(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.test")
    monkeypatch.setattr(settings, "smtp_user", "mailer")
    monkeypatch.setattr(_FakeSMTP, "sent", [])
    monkeypatch.setattr(smtplib, "SMTP", _FakeSMTP)

    await email.send_email("player@example.com", "Hello", "plain body", "<p>html body</p>")

    assert len(_FakeSMTP.sent) == 1
    sent = _FakeSMTP.sent[0]
    assert sent["host"] == "smtp.test"
    assert sent["from"] == settings.mail_from
    assert sent["to"] == ["player@example.com"]
    assert "Subject: Hello" in sent["message"]
    assert sent["thread"] != threading.get_ident()


async def test_send_email_failure_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(settings, "smtp_host", "smtp.test")
    monkeypatch.setattr(settings, "smtp_user", "mailer")
    monkeypatch.setattr(smtplib, "SMTP", _RefusingSMTP)

    await email.send_email("nobody@example.com", "Hello", "body")

    assert "Failed to send email to nobody@example.com" in caplog.text


async def test_send_email_without_smtp_only_logs(monkeypatch, caplog):
    monkeypatch.setattr(settings, "smtp_host", None)
    monkeypatch.setattr(smtplib, "SMTP", _RefusingSMTP)

    with caplog.at_level("INFO", logger="roleplay_server.services.email"):
        await email.send_email("player@example.com", "Hello", "body")

    assert "SMTP not configured" in caplog.text
