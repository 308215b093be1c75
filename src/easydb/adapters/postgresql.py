"""PostgreSQL connection (asyncpg).

asyncpg uses numbered ``$1`` placeholders and reports no ``lastrowid``:
inserts that need the generated key carry ``RETURNING <pk>`` and are run
with ``fetch``. Other statements report their row count through the
command status string (``"UPDATE 3"``, ``"INSERT 0 1"``).

Install the driver::

    pip install asyncpg
    # or:  pip install easydb[postgresql]
"""

from __future__ import annotations

import re
from typing import Any

from easydb.errors import ConfigError, DatabaseConnectionError
from easydb.result import UpdateResult

from .base import Connection
from .types import DatabaseConfig, DatabaseType

_RETURNING_RE = re.compile(r"\sRETURNING\s", re.IGNORECASE)


class PostgreSQLConnection(Connection):
    """
    PostgreSQL connection.

    Outside a transaction asyncpg runs each statement in its own implicit
    transaction, so writes are committed as soon as they return.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        connect_timeout: float = 10.0,
        statement_timeout: float | None = None,
        default_rpp: int = 20,
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.POSTGRESQL,
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            connect_timeout=connect_timeout,
            statement_timeout=statement_timeout,
            default_rpp=default_rpp,
            options=kwargs,
        )
        super().__init__(config)
        self._conn: Any = None
        self._txn: Any = None

    async def _connect(self) -> None:
        try:
            import asyncpg
        except ImportError:
            raise ConfigError(
                "asyncpg is required for PostgreSQL. Install with: pip install asyncpg"
            ) from None

        try:
            self._conn = await asyncpg.connect(
                host=self._config.host,
                port=self._config.port,
                database=self._config.database or None,
                user=self._config.username,
                password=self._config.password,
                timeout=self._config.connect_timeout,
                command_timeout=self._config.statement_timeout,
                **self._config.options,
            )
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to connect to PostgreSQL: {e}",
                cause=e,
            ).with_context(backend="postgresql") from e

    async def _disconnect(self) -> None:
        self._txn = None
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def _fetch(self, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        records = await self._conn.fetch(sql, *params)
        return [dict(record) for record in records]

    async def _execute(self, sql: str, params: tuple[Any, ...]) -> UpdateResult:
        if _RETURNING_RE.search(sql):
            records = await self._conn.fetch(sql, *params)
            insert_id = records[0][0] if records else 0
            return UpdateResult(rows_affected=len(records), insert_id=insert_id or 0)

        status = await self._conn.execute(sql, *params)
        return UpdateResult(rows_affected=_status_count(status))

    async def _begin(self) -> None:
        self._txn = self._conn.transaction()
        await self._txn.start()

    async def _commit(self) -> None:
        await self._txn.commit()
        self._txn = None

    async def _rollback(self) -> None:
        try:
            await self._txn.rollback()
        finally:
            self._txn = None


def _status_count(status: str | None) -> int:
    """Row count from an asyncpg command status (``"DELETE 2"`` → 2)."""
    if not status:
        return 0
    last = status.rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else 0


__all__ = [
    "PostgreSQLConnection",
]
