# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Email sending service. Logs to console when SMTP not configured."""

import asyncio
import logging
import smtplib
from email.message import Message
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from roleplay_server.config import settings

logger = logging.getLogger(__name__)


def _build_message(to: str, subject: str, body: str, html_body: str | None) -> Message:
    if html_body:
        msg = MIMEMultipart("alternative")
        msg.attach(MIMEText(body, "plain"))
        msg.attach(MIMEText(html_body, "html"))
    else:
        msg = MIMEText(body, "plain")
    msg["Subject"] = subject
    msg["From"] = settings.mail_from
    msg["To"] = to
    return msg


def _deliver(to: str, msg: Message) -> None:
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
        server.starttls()
        server.login(settings.smtp_user, settings.smtp_password or "")
        server.sendmail(settings.mail_from, [to], msg.as_string())


async def send_email(to: str, subject: str, body: str, html_body: str | None = None) -> None:
    """Send an email (plain, plus HTML when given). Logs to console if SMTP not configured."""
    if not (settings.smtp_host and settings.smtp_user):
        logger.info("Email (SMTP not configured): To=%s Subject=%s Body=%s", to, subject, body[:200])
        return
    msg = _build_message(to, subject, body, html_body)
    try:
        # smtplib blocks; keep it off the event loop
        await asyncio.to_thread(_deliver, to, msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.exception("Failed to send email to %s: %s", to, e)
