# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Session API routes: log in for a bearer token, log out to revoke it."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from roleplay_server.api.schemas import SessionCreate, SessionResponse, Token, UserResponse
from roleplay_server.auth import create_access_token, get_token_payload
from roleplay_server.database import get_db
from roleplay_server.errors import InvalidOperation
from roleplay_server.models import RevokedToken
from roleplay_server.services.users import authenticate

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def login(
    data: SessionCreate | None = None,
    db: AsyncSession = Depends(get_db),
) -> SessionResponse:
    """Authenticate with email and password and return a JWT."""
    if data is None or not data.email or not data.password:
        raise InvalidOperation("invalid credentials")
    user = await authenticate(db, data.email, data.password)
    if not user:
        raise InvalidOperation("invalid credentials")
    token = create_access_token({"sub": str(user.id)})
    return SessionResponse(user=UserResponse.model_validate(user), token=Token(token=token))


@router.delete("")
async def logout(
    payload: dict[str, Any] = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Revoke the bearer token used for this request."""
    if payload.get("jti"):
        db.add(
            RevokedToken(
                jti=payload["jti"],
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        )
        await db.commit()
    return {}
