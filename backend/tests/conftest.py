import os

# Settings are read once at import time, so point them at SQLite first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("PASSWORD_HASH_METHOD", "pbkdf2:sha256:1000")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from typing import AsyncIterator  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402

import taskboard.models  # noqa: E402,F401
from taskboard.db.base import Base  # noqa: E402
from taskboard.db.session import build_engine, build_session_factory, get_db_session  # noqa: E402
from taskboard.main import app  # noqa: E402


@pytest.fixture
async def session_factory():
    engine = build_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    await engine.dispose()


@pytest.fixture
async def db(session_factory) -> AsyncIterator:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncIterator[httpx.AsyncClient]:
    async def _override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user and return ``(user, auth_headers)``."""

    async def _register(email: str, password: str = "hunter22", name: str | None = None):
        response = await client.post(
            "/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _register


@pytest.fixture
def create_board(client):
    async def _create_board(headers: dict, title: str = "Sprint") -> dict:
        response = await client.post("/boards", json={"title": title}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["board"]

    return _create_board


@pytest.fixture
def create_list(client):
    async def _create_list(headers: dict, board_id: int, title: str) -> dict:
        response = await client.post(
            f"/boards/{board_id}/lists", json={"title": title}, headers=headers
        )
        assert response.status_code == 201, response.text
        return response.json()["list"]

    return _create_list


@pytest.fixture
def create_card(client):
    async def _create_card(headers: dict, board_id: int, list_id: int, title: str) -> dict:
        response = await client.post(
            f"/boards/{board_id}/lists/{list_id}/cards",
            json={"title": title},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["card"]

    return _create_card


@pytest.fixture
def invite_and_accept(client):
    """Make ``member_headers``'s user a member of ``board_id``."""

    async def _invite_and_accept(
        owner_headers: dict,
        board_id: int,
        member_email: str,
        member_headers: dict,
    ) -> None:
        invited = await client.post(
            f"/boards/{board_id}/invite", json={"email": member_email}, headers=owner_headers
        )
        assert invited.status_code == 201, invited.text
        invite_id = invited.json()["invite"]["id"]
        accepted = await client.post(
            f"/boards/invites/{invite_id}/accept", headers=member_headers
        )
        assert accepted.status_code == 200, accepted.text

    return _invite_and_accept
