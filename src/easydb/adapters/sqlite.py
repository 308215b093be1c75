"""SQLite connection (aiosqlite)."""

from __future__ import annotations

from typing import Any

from easydb.errors import ConfigError, DatabaseConnectionError
from easydb.result import UpdateResult

from .base import Connection
from .types import DatabaseConfig, DatabaseType


class SQLiteConnection(Connection):
    """
    SQLite connection.

    Uses ``aiosqlite``. Suitable for:
    - Development and testing
    - Single-process applications

    The driver connection runs in autocommit mode; transactions are
    explicit ``BEGIN`` / ``COMMIT`` / ``ROLLBACK``.
    """

    def __init__(
        self,
        path: str = ":memory:",
        *,
        timeout: float = 5.0,
        default_rpp: int = 20,
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.SQLITE,
            path=path,
            connect_timeout=timeout,
            default_rpp=default_rpp,
            options=kwargs,
        )
        super().__init__(config)
        self._conn: Any = None

    async def _connect(self) -> None:
        try:
            import aiosqlite
        except ImportError:
            raise ConfigError(
                "aiosqlite is required for SQLite. Install with: pip install aiosqlite"
            ) from None

        path = self._config.path or ":memory:"
        uri = path.startswith("file:")

        try:
            self._conn = await aiosqlite.connect(
                path,
                timeout=self._config.connect_timeout,
                isolation_level=None,
                uri=uri,
            )
            self._conn.row_factory = aiosqlite.Row
            await self._conn.execute("PRAGMA foreign_keys = ON")
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to connect to SQLite: {e}",
                cause=e,
            ).with_context(backend="sqlite") from e

    async def _disconnect(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def _fetch(self, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        async with self._conn.execute(sql, params) as cursor:
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def _execute(self, sql: str, params: tuple[Any, ...]) -> UpdateResult:
        async with self._conn.execute(sql, params) as cursor:
            rows_affected = max(cursor.rowcount, 0)
            # lastrowid carries over from earlier inserts on the same connection
            inserted = rows_affected > 0 and _is_insert(sql)
            insert_id = (cursor.lastrowid or 0) if inserted else 0
            return UpdateResult(rows_affected=rows_affected, insert_id=insert_id)

    async def _begin(self) -> None:
        await self._conn.execute("BEGIN")

    async def _commit(self) -> None:
        await self._conn.execute("COMMIT")

    async def _rollback(self) -> None:
        await self._conn.execute("ROLLBACK")


def _is_insert(sql: str) -> bool:
    head = sql.split(None, 1)
    return bool(head) and head[0].upper() in ("INSERT", "REPLACE")


__all__ = [
    "SQLiteConnection",
]
