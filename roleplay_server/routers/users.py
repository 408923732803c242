# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""User account API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from roleplay_server.api.schemas import UserCreate, UserEnvelope, UserResponse, UserUpdate
from roleplay_server.auth import get_current_user_id
from roleplay_server.database import get_db
from roleplay_server.services import users

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserEnvelope:
    """Create a new user account."""
    user = await users.register_user(
        db,
        username=data.username,
        email=data.email,
        password=data.password,
        avatar=data.avatar,
    )
    await db.commit()
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.put("/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: int,
    data: UserUpdate,
    current_user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> UserEnvelope:
    """Update email, avatar and password of the current user."""
    user = await users.update_user(
        db,
        user_id,
        current_user_id,
        email=data.email,
        password=data.password,
        avatar=data.avatar,
    )
    await db.commit()
    return UserEnvelope(user=UserResponse.model_validate(user))
