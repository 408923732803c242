# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Group membership requests.

A request goes PENDING -> ACCEPTED when the master accepts it (the requester
joins the roster in the same transaction), or is deleted when the master
rejects it. There is at most one request per (user, group).
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from roleplay_server.errors import Conflict, InvalidOperation, NotFound, ValidationFailed
from roleplay_server.models import Group, GroupRequest, GroupRequestStatus
from roleplay_server.services.groups import add_player, ensure_master, get_group, is_player

logger = logging.getLogger(__name__)


async def find_request(db: AsyncSession, group_id: int, user_id: int) -> GroupRequest | None:
    result = await db.execute(
        select(GroupRequest).where(
            GroupRequest.group_id == group_id,
            GroupRequest.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def create_request(db: AsyncSession, group_id: int, user_id: int) -> GroupRequest:
    """Open a PENDING request for user_id to join group_id."""
    group = await get_group(db, group_id)

    if await is_player(db, group.id, user_id):
        raise InvalidOperation("user is already in the group", status=422)

    if await find_request(db, group.id, user_id) is not None:
        raise Conflict("group request already exists")

    group_request = GroupRequest(group_id=group.id, user_id=user_id)
    db.add(group_request)
    try:
        await db.flush()
    except IntegrityError as e:
        raise Conflict("group request already exists") from e
    logger.info("Group request id=%s opened: user=%s group=%s", group_request.id, user_id, group.id)
    return group_request


async def list_pending_for_master(db: AsyncSession, master_id: int | None) -> list[GroupRequest]:
    """PENDING requests across every group owned by master_id, with user and group loaded."""
    if master_id is None:
        raise ValidationFailed("master query should be provided")
    result = await db.execute(
        select(GroupRequest)
        .join(Group, GroupRequest.group_id == Group.id)
        .where(
            Group.master == master_id,
            GroupRequest.status == GroupRequestStatus.PENDING,
        )
        .options(selectinload(GroupRequest.user), selectinload(GroupRequest.group))
        .order_by(GroupRequest.id)
    )
    return list(result.scalars().all())


async def _get_request_for_group(db: AsyncSession, group_id: int, request_id: int) -> GroupRequest:
    result = await db.execute(
        select(GroupRequest)
        .where(GroupRequest.id == request_id, GroupRequest.group_id == group_id)
        .options(selectinload(GroupRequest.group))
    )
    group_request = result.scalar_one_or_none()
    if not group_request:
        raise NotFound("group request not found")
    return group_request


async def accept_request(
    db: AsyncSession,
    group_id: int,
    request_id: int,
    acting_user_id: int,
) -> GroupRequest:
    """
    Mark the request ACCEPTED and put the requester on the roster.

    Both writes are flushed in the caller's transaction and nothing is
    committed here, so a failure while adding the roster entry rolls the
    status change back with it.
    """
    group_request = await _get_request_for_group(db, group_id, request_id)
    ensure_master(group_request.group, acting_user_id)

    group_request.status = GroupRequestStatus.ACCEPTED
    await db.flush()
    await add_player(db, group_request.group_id, group_request.user_id)
    logger.info(
        "Group request id=%s accepted: user=%s joined group=%s",
        group_request.id, group_request.user_id, group_request.group_id,
    )
    return group_request


async def reject_request(
    db: AsyncSession,
    group_id: int,
    request_id: int,
    acting_user_id: int,
) -> None:
    """Delete the request. Rejections leave no record behind."""
    group_request = await _get_request_for_group(db, group_id, request_id)
    ensure_master(group_request.group, acting_user_id)
    await db.delete(group_request)
    await db.flush()
    logger.info("Group request id=%s rejected", request_id)
