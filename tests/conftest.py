"""
Pytest configuration for the todo API.

Provides fixtures for:
- A file-backed SQLite pool (one database per test, table created)
- Settings isolated from the developer's environment and .env file
- A TestClient bound to an app built around that pool
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import Session

from todo_api.core.config import Settings
from todo_api.db.session import connect_url, init_db
from todo_api.main import create_app


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, ENV="test", APP_NAME="todo-api-test")


@pytest.fixture
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """Fresh SQLite database with the todos table, disposed after the test."""
    engine = connect_url(f"sqlite:///{tmp_path / 'todos.db'}")
    init_db(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def app(engine: Engine, test_settings: Settings):
    return create_app(engine, test_settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as client:
        yield client


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Write a JSON config file; keyword overrides replace or (with None) drop fields."""

    def _write(raw: str | None = None, **overrides) -> Path:
        path = tmp_path / "config.json"
        if raw is None:
            data = {
                "server": "db.internal",
                "user": "todo",
                "database": "todos",
                "port": "5432",
                "password": "s3cr3t-pa55",
            }
            data.update(overrides)
            data = {k: v for k, v in data.items() if v is not None}
            raw = json.dumps(data)
        path.write_text(raw, encoding="utf-8")
        return path

    return _write
