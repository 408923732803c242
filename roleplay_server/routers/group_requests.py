# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Group membership request API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from roleplay_server.api.schemas import (
    GroupRequestDetail,
    GroupRequestEnvelope,
    GroupRequestList,
    GroupRequestResponse,
)
from roleplay_server.auth import get_current_user_id
from roleplay_server.database import get_db
from roleplay_server.services import group_requests

router = APIRouter(prefix="/groups/{group_id}/requests", tags=["group requests"])


@router.get("", response_model=GroupRequestList)
async def list_requests(
    group_id: int,
    master: int | None = Query(None, description="List pending requests for groups this user masters"),
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> GroupRequestList:
    """Pending requests across all groups owned by the given master."""
    found = await group_requests.list_pending_for_master(db, master)
    return GroupRequestList(group_requests=[GroupRequestDetail.model_validate(r) for r in found])


@router.post("", response_model=GroupRequestEnvelope, status_code=status.HTTP_201_CREATED)
async def create_request(
    group_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> GroupRequestEnvelope:
    """Ask to join a group as the current user."""
    group_request = await group_requests.create_request(db, group_id, user_id)
    await db.commit()
    return GroupRequestEnvelope(group_request=GroupRequestResponse.model_validate(group_request))


@router.post("/{request_id}/accept", response_model=GroupRequestEnvelope)
async def accept_request(
    group_id: int,
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> GroupRequestEnvelope:
    """Accept a request and add the requester to the roster. Master only."""
    group_request = await group_requests.accept_request(db, group_id, request_id, user_id)
    await db.commit()
    return GroupRequestEnvelope(group_request=GroupRequestResponse.model_validate(group_request))


@router.delete("/{request_id}")
async def reject_request(
    group_id: int,
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Reject (delete) a request. Master only."""
    await group_requests.reject_request(db, group_id, request_id, user_id)
    await db.commit()
    return {}
