# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""User model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roleplay_server.models.base import Base
from roleplay_server.models.timestamp import TimestampMixin


class User(Base, TimestampMixin):
    """Player account. The password hash never leaves the server."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[str] = mapped_column(String(1024), default="", server_default="", nullable=False)

    tokens: Mapped[list["LinkToken"]] = relationship(
        "LinkToken", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
