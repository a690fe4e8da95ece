"""
Shared fixtures.

Environment is set before any application module is imported so that
``config.settings.config`` picks up a test signing secret and a SQLite URL.
"""

import asyncio
import os
import uuid
from datetime import date
from typing import Optional

os.environ.setdefault("JWT_SECRET", "test-signing-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from auth.password import hash_password
from database.models import Base, User
from database.session import get_db_session
from main import app


class FakeUserStore:
    """In-memory ``UserStore`` keyed by username."""

    def __init__(self, *users: User) -> None:
        self.users = {u.username: u for u in users}

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        return self.users.get(identifier)

    async def find_by_id(self, user_id: str) -> Optional[User]:
        for user in self.users.values():
            if str(user.user_id) == str(user_id):
                return user
        return None

    def delete(self, username: str) -> None:
        self.users.pop(username, None)


def make_user(username: str = "alice", password: str = "correct") -> User:
    return User(
        user_id=uuid.uuid4(),
        username=username,
        password_hash=hash_password(password),
        email=f"{username}@example.com",
        birthday=date(1990, 1, 1),
        favorite_movies=[],
    )


@pytest.fixture
def alice() -> User:
    return make_user("alice", "correct")


@pytest.fixture
def store(alice) -> FakeUserStore:
    return FakeUserStore(alice)


# ── HTTP-level fixtures ─────────────────────────────────────────────────


@pytest.fixture
def client(tmp_path):
    """TestClient backed by a throw-away SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'flix.db'}", poolclass=NullPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_tables())

    async def _session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


def register(client: TestClient, username: str = "alice", password: str = "correct") -> dict:
    res = client.post(
        "/users",
        json={
            "Username": username,
            "Password": password,
            "Email": f"{username}@example.com",
            "Birthday": "1990-01-01",
        },
    )
    assert res.status_code == 201, res.text
    return res.json()["user"]


def login(client: TestClient, username: str = "alice", password: str = "correct") -> str:
    res = client.post("/login", json={"Username": username, "Password": password})
    assert res.status_code == 200, res.text
    return res.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
