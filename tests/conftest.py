from __future__ import annotations

import os
import tempfile

import pytest
from fastapi.testclient import TestClient

_TMP = tempfile.mkdtemp(prefix="campus-connect-tests-")

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{_TMP}/campus.db"
os.environ["STORAGE_ROOT"] = os.path.join(_TMP, "storage")
os.environ.setdefault("ENV", "local")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DEFAULT_EVENT_CAPACITY", "50")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from campus_connect.db import get_database  # noqa: E402
from campus_connect.main import app  # noqa: E402


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def db_session():
    db = get_database().session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db():
    database = get_database()
    database.drop_all()
    database.create_all()
    yield
