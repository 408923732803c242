# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Password reset: issue link tokens by email and consume them once."""

import html
import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from roleplay_server.auth import hash_password
from roleplay_server.config import settings
from roleplay_server.errors import NotFound, TokenExpired
from roleplay_server.models import LinkToken
from roleplay_server.services import email
from roleplay_server.services.users import find_by_email

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Roleplay: Recuperação de Senha"


def token_lifetime() -> timedelta:
    return timedelta(hours=settings.password_reset_token_hours)


def is_expired(created_at: datetime, now: datetime | None = None) -> bool:
    """True when the token is older than its lifetime. Naive timestamps are read as UTC."""
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return now - created_at > token_lifetime()


def build_reset_link(reset_password_url: str, token: str) -> str:
    separator = "&" if "?" in reset_password_url else "?"
    return f"{reset_password_url}{separator}token={token}"


async def forgot_password(db: AsyncSession, email_address: str, reset_password_url: str) -> None:
    """
    Issue a reset token and mail the link when the email belongs to a user.
    Unknown emails are ignored so the response never reveals who is registered.
    """
    user = await find_by_email(db, email_address)
    if not user:
        logger.info("Password reset requested for unknown email")
        return

    await db.execute(delete(LinkToken).where(LinkToken.user_id == user.id))
    token = secrets.token_hex(24)
    db.add(LinkToken(token=token, user_id=user.id))
    await db.flush()

    link = build_reset_link(reset_password_url, token)
    hours = settings.password_reset_token_hours
    body = (
        f"Olá, {user.username}!\n\n"
        f"Para redefinir sua senha, acesse o link abaixo:\n{link}\n\n"
        f"O link expira em {hours:g} horas."
    )
    html_body = (
        f"<p>Olá, <strong>{html.escape(user.username)}</strong>!</p>"
        f"<p>Para redefinir sua senha, acesse o link abaixo:</p>"
        f'<p><a href="{html.escape(link)}">{html.escape(link)}</a></p>'
        f"<p>O link expira em {hours:g} horas.</p>"
    )
    await email.send_email(user.email, RESET_SUBJECT, body, html_body)
    logger.info("Password reset token issued for user id=%s", user.id)


async def reset_password(db: AsyncSession, token: str, new_password: str) -> None:
    """Set a new password using a link token, then delete the token."""
    result = await db.execute(
        select(LinkToken)
        .where(LinkToken.token == token)
        .options(selectinload(LinkToken.user))
    )
    link_token = result.scalar_one_or_none()
    if not link_token:
        raise NotFound("token not found")
    if is_expired(link_token.created_at):
        raise TokenExpired("token is expired")

    link_token.user.password_hash = hash_password(new_password)
    await db.delete(link_token)
    await db.flush()
    logger.info("Password reset for user id=%s", link_token.user_id)
