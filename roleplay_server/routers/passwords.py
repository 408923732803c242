# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Password recovery API routes."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from roleplay_server.api.schemas import ForgotPasswordRequest, ResetPasswordRequest
from roleplay_server.database import get_db
from roleplay_server.services import passwords

router = APIRouter(tags=["passwords"])


@router.post("/forgot-password", status_code=status.HTTP_204_NO_CONTENT)
async def forgot_password(
    data: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Email a reset link. Answers 204 whether or not the email is registered."""
    await passwords.forgot_password(db, data.email, str(data.reset_password_url))
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/reset-password", status_code=status.HTTP_204_NO_CONTENT)
async def reset_password(
    data: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Set a new password with a token from the reset email."""
    await passwords.reset_password(db, data.token, data.password)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
