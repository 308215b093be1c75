"""
Test support utilities for easydb tests.

Models, seed data and backend doubles that don't fit as pytest fixtures
but are imported across multiple test files.
"""

from __future__ import annotations

from typing import Any

from easydb import Model, UpdateResult
from easydb.adapters.base import Connection
from easydb.adapters.types import DatabaseConfig, DatabaseType


class User(Model):
    table_name = "users"

    id: int | None = None
    name: str
    email: str | None = None
    status: str = "active"
    age: int | None = None


class Tag(Model):
    """Natural-key model: the caller supplies the primary key."""

    table_name = "tags"
    primary_key = "slug"
    auto_increment = False

    slug: str
    label: str


USERS_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT UNIQUE,
    status TEXT NOT NULL DEFAULT 'active',
    age INTEGER
)
"""

TAGS_DDL = "CREATE TABLE tags (slug TEXT PRIMARY KEY, label TEXT NOT NULL)"

SEED_USERS = [
    ("Alice", "alice@example.com", "active", 31),
    ("Bob", "bob@example.com", "active", 25),
    ("Carol", "carol@example.com", "active", 19),
    ("Dave", "dave@example.com", "disabled", 42),
    ("Eve", None, "pending", None),
]


class RecordingConnection(Connection):
    """Backend double: records compiled statements and replays canned results.

    ``rows`` is a queue of results for successive ``_fetch`` calls;
    ``update_result`` is returned by every ``_execute`` call. Set
    ``fail_with`` to make statements (and commit) raise.
    """

    def __init__(self, db_type: DatabaseType = DatabaseType.SQLITE, default_rpp: int = 20):
        super().__init__(DatabaseConfig(db_type=db_type, default_rpp=default_rpp))
        self.statements: list[tuple[str, tuple[Any, ...]]] = []
        self.rows: list[list[dict[str, Any]]] = []
        self.update_result = UpdateResult(rows_affected=1, insert_id=0)
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    @property
    def sql(self) -> list[str]:
        return [sql for sql, _ in self.statements]

    async def _connect(self) -> None:
        self.calls.append("connect")

    async def _disconnect(self) -> None:
        self.calls.append("disconnect")

    async def _fetch(self, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        self.statements.append((sql, params))
        if self.fail_with is not None:
            raise self.fail_with
        return self.rows.pop(0) if self.rows else []

    async def _execute(self, sql: str, params: tuple[Any, ...]) -> UpdateResult:
        self.statements.append((sql, params))
        if self.fail_with is not None:
            raise self.fail_with
        return self.update_result

    async def _begin(self) -> None:
        self.calls.append("begin")

    async def _commit(self) -> None:
        self.calls.append("commit")
        if self.fail_with is not None:
            raise self.fail_with

    async def _rollback(self) -> None:
        self.calls.append("rollback")
