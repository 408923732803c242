# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pydantic schemas for API request/response. JSON keys are camelCase."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl
from pydantic.alias_generators import to_camel

from roleplay_server.models import GroupRequestStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Users
class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=4, max_length=72)
    avatar: str = ""


class UserUpdate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=4, max_length=72)
    avatar: str | None = None


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    avatar: str
    created_at: datetime
    updated_at: datetime


class UserPublic(CamelModel):
    id: int
    username: str
    avatar: str


class UserEnvelope(CamelModel):
    user: UserResponse


# Sessions
class SessionCreate(CamelModel):
    # Missing credentials answer 400, same as wrong ones
    email: str | None = None
    password: str | None = None


class Token(CamelModel):
    type: str = "bearer"
    token: str


class SessionResponse(CamelModel):
    user: UserResponse
    token: Token


# Passwords
class ForgotPasswordRequest(CamelModel):
    email: EmailStr
    reset_password_url: HttpUrl


class ResetPasswordRequest(CamelModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=4, max_length=72)


# Groups
class GroupCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=255)
    schedule: str = Field(min_length=1, max_length=255)
    location: str = Field(min_length=1, max_length=255)
    chronic: str = Field(min_length=1, max_length=255)
    master: int


class GroupUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1, max_length=255)
    schedule: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    chronic: str | None = Field(default=None, min_length=1, max_length=255)


class GroupResponse(CamelModel):
    id: int
    name: str
    description: str
    schedule: str
    location: str
    chronic: str
    master: int
    created_at: datetime
    updated_at: datetime


class PlayerResponse(CamelModel):
    id: int
    username: str
    email: str
    avatar: str


class GroupDetail(GroupResponse):
    master_user: PlayerResponse
    players: list[PlayerResponse]


class GroupEnvelope(CamelModel):
    group: GroupDetail


class PageMeta(CamelModel):
    total: int
    per_page: int
    current_page: int
    last_page: int


class GroupPage(CamelModel):
    meta: PageMeta
    data: list[GroupDetail]


class GroupList(CamelModel):
    groups: GroupPage


# Group requests
class GroupRequestResponse(CamelModel):
    id: int
    user_id: int
    group_id: int
    status: GroupRequestStatus
    created_at: datetime
    updated_at: datetime


class GroupRequestEnvelope(CamelModel):
    group_request: GroupRequestResponse


class GroupSummary(CamelModel):
    id: int
    name: str
    master: int


class GroupRequestDetail(GroupRequestResponse):
    user: UserPublic
    group: GroupSummary


class GroupRequestList(CamelModel):
    group_requests: list[GroupRequestDetail]
