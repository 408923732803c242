# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Groups and their rosters. The master is always on the roster."""

import logging
import math

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from roleplay_server.errors import Forbidden, InvalidOperation, NotFound, ValidationFailed
from roleplay_server.models import Group, GroupPlayer, GroupRequest, User

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "schedule", "location", "chronic")


def _detail_options():
    return (
        selectinload(Group.master_user),
        selectinload(Group.roster).selectinload(GroupPlayer.user),
    )


async def get_group(db: AsyncSession, group_id: int) -> Group:
    """Load a group by id or raise NotFound."""
    group = await db.get(Group, group_id)
    if not group:
        raise NotFound("group not found")
    return group


async def get_group_detail(db: AsyncSession, group_id: int) -> Group:
    """Load a group with master_user and roster users, refreshing any cached copy."""
    result = await db.execute(
        select(Group)
        .where(Group.id == group_id)
        .options(*_detail_options())
        .execution_options(populate_existing=True)
    )
    group = result.scalar_one_or_none()
    if not group:
        raise NotFound("group not found")
    return group


def ensure_master(group: Group, acting_user_id: int) -> None:
    if group.master != acting_user_id:
        raise Forbidden("only the group master can do this")


async def is_player(db: AsyncSession, group_id: int, user_id: int) -> bool:
    result = await db.execute(
        select(GroupPlayer.user_id).where(
            GroupPlayer.group_id == group_id,
            GroupPlayer.user_id == user_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def add_player(db: AsyncSession, group_id: int, user_id: int) -> bool:
    """Attach a user to the roster. Returns False when already present."""
    if await is_player(db, group_id, user_id):
        return False
    db.add(GroupPlayer(group_id=group_id, user_id=user_id))
    await db.flush()
    return True


async def create_group(db: AsyncSession, data: dict) -> Group:
    """Create a group and seed its roster with exactly the master."""
    if not await db.get(User, data["master"]):
        raise ValidationFailed("master user does not exist")
    group = Group(**data)
    db.add(group)
    await db.flush()
    await add_player(db, group.id, group.master)
    logger.info("Created group id=%s master=%s", group.id, group.master)
    return await get_group_detail(db, group.id)


async def update_group(db: AsyncSession, group_id: int, acting_user_id: int, changes: dict) -> Group:
    """Merge editable fields into the group. The master is not reassignable here."""
    group = await get_group(db, group_id)
    ensure_master(group, acting_user_id)
    for field in EDITABLE_FIELDS:
        if field in changes:
            setattr(group, field, changes[field])
    await db.flush()
    return await get_group_detail(db, group.id)


async def delete_group(db: AsyncSession, group_id: int, acting_user_id: int) -> None:
    """Delete the group together with its roster and membership requests."""
    group = await get_group(db, group_id)
    ensure_master(group, acting_user_id)
    await db.execute(delete(GroupRequest).where(GroupRequest.group_id == group.id))
    await db.execute(delete(GroupPlayer).where(GroupPlayer.group_id == group.id))
    await db.delete(group)
    await db.flush()
    logger.info("Deleted group id=%s", group_id)


async def remove_player(db: AsyncSession, group_id: int, player_id: int, acting_user_id: int) -> None:
    """
    Detach a player from the roster. The master cannot be removed.
    Allowed for the master and for the player leaving on their own.
    Removing someone who is not on the roster is a no-op. The player's old
    requests for this group go too, so they can ask to join again.
    """
    group = await get_group(db, group_id)
    if player_id == group.master:
        raise InvalidOperation("cannot remove master from group")
    if acting_user_id not in (group.master, player_id):
        raise Forbidden("only the group master can remove other players")
    await db.execute(
        delete(GroupPlayer).where(
            GroupPlayer.group_id == group.id,
            GroupPlayer.user_id == player_id,
        )
    )
    await db.execute(
        delete(GroupRequest).where(
            GroupRequest.group_id == group.id,
            GroupRequest.user_id == player_id,
        )
    )
    await db.flush()
    logger.info("Removed user=%s from group=%s", player_id, group.id)


async def list_groups(
    db: AsyncSession,
    user_id: int | None = None,
    text: str | None = None,
    page: int = 1,
    per_page: int = 10,
) -> tuple[list[Group], dict]:
    """
    Groups ordered by id, optionally limited to those where user_id is on the
    roster and/or whose name or description contains text (case-sensitive).
    Returns (groups, pagination meta).
    """
    query = select(Group)
    if user_id is not None:
        query = query.where(
            Group.id.in_(select(GroupPlayer.group_id).where(GroupPlayer.user_id == user_id))
        )
    if text:
        query = query.where(
            or_(
                Group.name.contains(text, autoescape=True),
                Group.description.contains(text, autoescape=True),
            )
        )

    total = await db.scalar(select(func.count()).select_from(query.subquery())) or 0
    result = await db.execute(
        query.options(*_detail_options())
        .order_by(Group.id)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    groups = list(result.scalars().all())
    meta = {
        "total": total,
        "per_page": per_page,
        "current_page": page,
        "last_page": max(1, math.ceil(total / per_page)),
    }
    return groups, meta
