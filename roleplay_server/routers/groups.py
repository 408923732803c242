# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Group API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from roleplay_server.api.schemas import (
    GroupCreate,
    GroupDetail,
    GroupEnvelope,
    GroupList,
    GroupPage,
    GroupUpdate,
    PageMeta,
)
from roleplay_server.auth import get_current_user_id
from roleplay_server.config import settings
from roleplay_server.database import get_db
from roleplay_server.services import groups

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=GroupList)
async def list_groups(
    user: int | None = Query(None, description="Only groups this user plays in"),
    text: str | None = Query(None, description="Substring of name or description (case-sensitive)"),
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, alias="perPage", ge=1, le=100),
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> GroupList:
    """List groups with their master and players, paginated."""
    found, meta = await groups.list_groups(
        db,
        user_id=user,
        text=text,
        page=page,
        per_page=per_page or settings.groups_per_page,
    )
    return GroupList(
        groups=GroupPage(
            meta=PageMeta(**meta),
            data=[GroupDetail.model_validate(g) for g in found],
        )
    )


@router.post("", response_model=GroupEnvelope, status_code=status.HTTP_201_CREATED)
async def create_group(
    data: GroupCreate,
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> GroupEnvelope:
    """Create a group; its master becomes the first player."""
    group = await groups.create_group(db, data.model_dump())
    await db.commit()
    return GroupEnvelope(group=GroupDetail.model_validate(group))


@router.patch("/{group_id}", response_model=GroupEnvelope)
async def update_group(
    group_id: int,
    data: GroupUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> GroupEnvelope:
    """Update group details. Master only."""
    group = await groups.update_group(
        db, group_id, user_id, data.model_dump(exclude_unset=True, exclude_none=True)
    )
    await db.commit()
    return GroupEnvelope(group=GroupDetail.model_validate(group))


@router.delete("/{group_id}")
async def delete_group(
    group_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Delete a group with its roster and pending requests. Master only."""
    await groups.delete_group(db, group_id, user_id)
    await db.commit()
    return {}


@router.delete("/{group_id}/players/{player_id}")
async def remove_player(
    group_id: int,
    player_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Remove a player from the roster. The master cannot be removed."""
    await groups.remove_player(db, group_id, player_id, user_id)
    await db.commit()
    return {}
