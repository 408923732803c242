# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Group and roster models."""

from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roleplay_server.models.base import Base
from roleplay_server.models.timestamp import TimestampMixin, utcnow


class Group(Base, TimestampMixin):
    """Role-playing group run by its master."""

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    schedule: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    chronic: Mapped[str] = mapped_column(String(255), nullable=False)
    master: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    master_user: Mapped["User"] = relationship("User", foreign_keys=[master])
    roster: Mapped[list["GroupPlayer"]] = relationship(
        "GroupPlayer",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="GroupPlayer.added_at, GroupPlayer.user_id",
    )
    requests: Mapped[list["GroupRequest"]] = relationship(
        "GroupRequest",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def players(self) -> list["User"]:
        """Roster users in join order. Requires roster and roster.user to be loaded."""
        return [entry.user for entry in self.roster]


class GroupPlayer(Base):
    """Roster entry: one user playing in one group."""

    __tablename__ = "groups_users"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_groups_users_group_user"),
    )

    group_id: Mapped[int] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    group: Mapped["Group"] = relationship("Group", back_populates="roster")
    user: Mapped["User"] = relationship("User")
