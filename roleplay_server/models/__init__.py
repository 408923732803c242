# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Database models."""

from roleplay_server.models.base import Base
from roleplay_server.models.user import User
from roleplay_server.models.group import Group, GroupPlayer
from roleplay_server.models.group_request import GroupRequest, GroupRequestStatus
from roleplay_server.models.link_token import LinkToken
from roleplay_server.models.revoked_token import RevokedToken

__all__ = [
    "Base",
    "User",
    "Group",
    "GroupPlayer",
    "GroupRequest",
    "GroupRequestStatus",
    "LinkToken",
    "RevokedToken",
]
