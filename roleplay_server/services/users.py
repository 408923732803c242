# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""User accounts: registration, profile update, credential checks."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from roleplay_server.auth import hash_password, verify_password
from roleplay_server.errors import Conflict, Forbidden, NotFound
from roleplay_server.models import User

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> User:
    """Load a user by id or raise NotFound."""
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("user not found")
    return user


async def find_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def find_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession,
    username: str,
    email: str,
    password: str,
    avatar: str = "",
) -> User:
    """Create a user. Email is checked before username; either taken raises Conflict."""
    if await find_by_email(db, email):
        raise Conflict("email already in use")
    if await find_by_username(db, username):
        raise Conflict("username already in use")
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        avatar=avatar,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same email or username
        raise Conflict("email or username already in use") from e
    logger.info("Registered user id=%s", user.id)
    return user


async def update_user(
    db: AsyncSession,
    user_id: int,
    acting_user_id: int,
    email: str,
    password: str,
    avatar: str | None = None,
) -> User:
    """Update email, password and (when given) avatar. Only the account owner may do this."""
    user = await get_user(db, user_id)
    if user.id != acting_user_id:
        raise Forbidden("cannot update another user")
    if email != user.email:
        other = await find_by_email(db, email)
        if other and other.id != user.id:
            raise Conflict("email already in use")
    user.email = email
    if avatar is not None:
        user.avatar = avatar
    user.password_hash = hash_password(password)
    try:
        await db.flush()
    except IntegrityError as e:
        raise Conflict("email already in use") from e
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    """Return the user when email and password match, else None."""
    user = await find_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user
