"""
Shared pytest fixtures and configuration for easydb tests.

This module provides:
- Settings cache reset for test isolation
- In-memory SQLite connection, empty or with a seeded ``users`` table
- Recording fake backends for asserting the exact SQL a connection emits

Usage:
    Fixtures are auto-discovered by pytest. Simply use them as function
    arguments (pytest injects them automatically).

    @pytest.mark.asyncio
    async def test_something(users_db):
        page = await users_db.list(User)
"""

from __future__ import annotations

import os
import sys
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio

# Ensure easydb package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from easydb import SQLiteConnection
from easydb.adapters.types import DatabaseType
from easydb.settings import reset_settings
from tests._support import SEED_USERS, TAGS_DDL, USERS_DDL, RecordingConnection


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark every test without an explicit marker as a unit test."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop EASYDB_* variables and the cached settings around each test."""
    for key in list(os.environ):
        if key.startswith("EASYDB_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(Path(__file__).parent)
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# SQLite fixtures
# =============================================================================


@pytest_asyncio.fixture
async def sqlite_db() -> AsyncGenerator[SQLiteConnection, None]:
    """Empty, connected in-memory SQLite connection (``default_rpp=10``)."""
    conn = SQLiteConnection(":memory:", default_rpp=10)
    await conn.connect()
    try:
        yield conn
    finally:
        await conn.disconnect()


@pytest_asyncio.fixture
async def users_db(sqlite_db: SQLiteConnection) -> SQLiteConnection:
    """In-memory SQLite connection with seeded ``users`` (ids 1-5) and empty ``tags``."""
    await sqlite_db.exec_update(USERS_DDL)
    await sqlite_db.exec_update(TAGS_DDL)
    for name, email, status, age in SEED_USERS:
        await sqlite_db.exec_update(
            "INSERT INTO users (name, email, status, age) VALUES (#name#, #email#, #status#, #age#)",
            {"name": name, "email": email, "status": status, "age": age},
        )
    return sqlite_db


# =============================================================================
# Recording backends
# =============================================================================


@pytest.fixture
def recorder() -> RecordingConnection:
    """SQLite-dialect recording backend."""
    return RecordingConnection()


@pytest.fixture
def pg_recorder() -> RecordingConnection:
    """PostgreSQL-dialect recording backend."""
    return RecordingConnection(db_type=DatabaseType.POSTGRESQL)


@pytest.fixture
def mysql_recorder() -> RecordingConnection:
    """MySQL-dialect recording backend."""
    return RecordingConnection(db_type=DatabaseType.MYSQL)
