# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest fixtures. Each test gets its own SQLite database file and API client."""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from roleplay_server.auth import create_access_token, hash_password, pwd_context
from roleplay_server.database import get_db
from roleplay_server.main import app
from roleplay_server.models import Base, Group, GroupPlayer, User

# Cheap hashes; tests never need production cost.
pwd_context.update(bcrypt__rounds=4)

DEFAULT_PASSWORD = "secret1"


@pytest.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    @event.listens_for(test_engine.sync_engine, "connect")
    def _sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA case_sensitive_like=ON")
        cursor.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def client(session_maker):
    async def _get_test_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def outbox(monkeypatch):
    """Captured emails as dicts with to/subject/body/html."""
    sent = []

    async def _capture(to, subject, body, html_body=None):
        sent.append({"to": to, "subject": subject, "body": body, "html": html_body})

    monkeypatch.setattr("roleplay_server.services.email.send_email", _capture)
    return sent


@pytest.fixture
def make_user(session_maker):
    async def _make(username=None, email=None, password=DEFAULT_PASSWORD, avatar="") -> User:
        suffix = uuid.uuid4().hex[:8]
        user = User(
            username=username or f"player_{suffix}",
            email=email or f"player_{suffix}@example.com",
            password_hash=hash_password(password),
            avatar=avatar,
        )
        async with session_maker() as session:
            session.add(user)
            await session.commit()
        return user

    return _make


@pytest.fixture
def make_group(session_maker):
    async def _make(master: User, **fields) -> Group:
        data = {
            "name": "test",
            "description": "test",
            "schedule": "test",
            "location": "test",
            "chronic": "test",
        }
        data.update(fields)
        group = Group(master=master.id, **data)
        async with session_maker() as session:
            session.add(group)
            await session.flush()
            session.add(GroupPlayer(group_id=group.id, user_id=master.id))
            await session.commit()
        return group

    return _make


@pytest.fixture
def roster(session_maker):
    """Roster user ids of a group in join order."""
    async def _roster(group_id: int) -> list[int]:
        async with session_maker() as session:
            result = await session.execute(
                select(GroupPlayer.user_id)
                .where(GroupPlayer.group_id == group_id)
                .order_by(GroupPlayer.added_at, GroupPlayer.user_id)
            )
            return list(result.scalars().all())

    return _roster


@pytest.fixture
def auth_headers():
    """Bearer header for a user, as issued by the login endpoint."""
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}

    return _headers
