"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os
import tempfile

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET and a throwaway upload directory for test runs.
# This must happen before any import of studyhub.api.deps (validates the
# secret at module-load time) or studyhub.services.upload_service.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)
os.environ.setdefault("STUDYHUB_UPLOAD_DIR", tempfile.mkdtemp(prefix="studyhub-uploads-"))

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine, event  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from studyhub.config import StudyHubConfig  # noqa: E402
from studyhub.database.models import Base, User  # noqa: E402


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all StudyHub tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used for uploads and by the
    TestClient's threadpool).
    """
    from sqlalchemy.pool import StaticPool

    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN; emit it ourselves so SAVEPOINTs nest properly.
    # Foreign keys are enforced as on PostgreSQL.
    @event.listens_for(engine, "connect")
    def _no_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine):
    """Provide a transactional session that rolls back after each test."""
    with Session(db_engine) as session:
        yield session
        session.rollback()


@pytest.fixture
def test_config() -> StudyHubConfig:
    return StudyHubConfig(site_name="StudyHub Test")


@pytest.fixture
def make_user(db_engine: Engine):
    """Factory: insert a user row directly (no hashing, no journal) and return its id."""

    def _make(username: str = "alice", credits: int = 0) -> int:
        with Session(db_engine) as session:
            user = User(username=username, password_hash="not-a-real-hash", credits=credits)
            session.add(user)
            session.commit()
            return user.id

    return _make


def auth_headers(user_id: int, username: str = "alice") -> dict:
    from studyhub.api.deps import issue_token

    return {"Authorization": f"Bearer {issue_token(user_id, username)}"}


@pytest.fixture
def auth():
    """Return the bearer-header builder."""
    return auth_headers


@pytest.fixture
def client(db_engine, test_config):
    """FastAPI TestClient wired to the in-memory engine and a test config."""
    from fastapi.testclient import TestClient

    from studyhub.api.deps import get_config, get_engine
    from studyhub.api.main import app

    app.dependency_overrides[get_engine] = lambda: db_engine
    app.dependency_overrides[get_config] = lambda: test_config
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
