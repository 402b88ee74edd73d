"""Shared fixtures.

Every test gets its own SQLite file under ``tmp_path`` so no state leaks
between tests or into the working tree's ``data/`` directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from expense_ledger.core.config import Settings
from expense_ledger.db.dal import Database
from expense_ledger.main import create_app


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "ledger.sqlite3"


@pytest.fixture
def db(db_path: Path) -> Iterator[Database]:
    database = Database(db_path)
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    s = Settings(data_dir=tmp_path / "data", db_filename="api.sqlite3")
    s.init_post_load()
    return s


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(settings_override=settings)) as c:
        yield c
