# tests/conftest.py

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from todo_api.core.config import Settings
from todo_api.database import Database
from todo_api.main import create_app

from helpers import register


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file, with tables created on startup."""
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'todos.sqlite3'}",
        db_synchronize=True,
        jwt_secret="test-secret",
        jwt_expires_in=3600,
    )


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
async def database(settings: Settings):
    db = Database.from_settings(settings)
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture()
async def session(database: Database):
    async with database.session_factory() as s:
        yield s


@pytest.fixture()
def alice(client) -> dict:
    return register(client, "alice@example.com", "secret1", "Alice")


@pytest.fixture()
def bob(client) -> dict:
    return register(client, "bob@example.com", "secret2", "Bob")
