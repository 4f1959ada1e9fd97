# tests/conftest.py
import httpx
import pytest
from sqlalchemy import select

from registration_service.app import create_app
from registration_service.config import Settings
from registration_service.models import User

SIGNUP_URL = "/api/1.0/users"

VALID_USER = {
    "username": "user1",
    "email": "user1@mail.com",
    "password": "P4ssword",
}


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throw-away SQLite file for each test."""
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")


@pytest.fixture
async def app(settings):
    """Application with its lifespan running (tables created, engine disposed after)."""
    application = create_app(settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def post_user(client):
    """Post a signup payload, optionally with an ``Accept-Language`` header."""

    async def _post(user=None, language=None):
        headers = {"Accept-Language": language} if language else {}
        body = dict(VALID_USER) if user is None else user
        return await client.post(SIGNUP_URL, json=body, headers=headers)

    return _post


@pytest.fixture
def list_users(app):
    """Return every stored ``User`` row."""

    async def _list():
        async with app.state.session_factory() as session:
            result = await session.execute(select(User).order_by(User.id))
            return result.scalars().all()

    return _list


@pytest.fixture
def create_user(app):
    """Insert a user directly, bypassing the endpoint."""

    async def _create(**overrides):
        record = {
            "username": VALID_USER["username"],
            "email": VALID_USER["email"],
            "hashed_password": "not-a-real-hash",
        }
        record.update(overrides)
        return await app.state.user_store.create(record)

    return _create
