# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from agent_task_api.app.core.config import settings
from agent_task_api.app.core.db import init_db
from agent_task_api.app.main import app


@pytest.fixture()
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Point the application at a fresh SQLite file and apply migrations.

    Every test gets its own database, so tests never see each other's rows.
    """
    db_path = tmp_path / "agent_tasks.sqlite3"
    monkeypatch.setattr(settings, "database_url", str(db_path))
    init_db()
    return db_path


@pytest.fixture()
def client(database: Path) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
