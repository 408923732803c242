# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Group membership request model."""

import enum

from sqlalchemy import Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roleplay_server.models.base import Base
from roleplay_server.models.timestamp import TimestampMixin


class GroupRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"


class GroupRequest(Base, TimestampMixin):
    """A user's request to join a group. Rejected requests are deleted, not kept."""

    __tablename__ = "groups_requests"
    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_groups_requests_user_group"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    group_id: Mapped[int] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[GroupRequestStatus] = mapped_column(
        Enum(GroupRequestStatus, name="group_request_status"),
        default=GroupRequestStatus.PENDING,
        server_default=GroupRequestStatus.PENDING.value,
        nullable=False,
    )

    user: Mapped["User"] = relationship("User")
    group: Mapped["Group"] = relationship("Group", back_populates="requests")
