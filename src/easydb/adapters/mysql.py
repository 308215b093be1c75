"""MySQL connection.

Uses the asyncio API of ``mysql.connector`` (``mysql.connector.aio``) from
the ``mysql-connector-python`` package. Statements run through prepared
cursors (``cursor(prepared=True)``): the SQL text goes to the server with
``?`` markers and the values travel separately in the binary protocol, so
the driver never interpolates into the statement text.

Install the driver::

    pip install mysql-connector-python
    # or:  pip install easydb[mysql]

This connection is import-guarded: if ``mysql.connector`` is not installed
a clear :class:`~easydb.errors.ConfigError` is raised at ``connect()`` time.
"""

from __future__ import annotations

from typing import Any

from easydb.errors import ConfigError, DatabaseConnectionError
from easydb.result import UpdateResult

from .base import Connection
from .types import DatabaseConfig, DatabaseType


class MySQLConnection(Connection):
    """MySQL / MariaDB connection.

    The driver connection runs with ``autocommit=True``;
    ``begin_transaction`` opens an explicit transaction until commit or
    rollback.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 3306,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        charset: str = "utf8mb4",
        connect_timeout: float = 10.0,
        default_rpp: int = 20,
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.MYSQL,
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            connect_timeout=connect_timeout,
            default_rpp=default_rpp,
            options={**(kwargs or {}), "charset": charset},
        )
        super().__init__(config)
        self._conn: Any = None

    async def _connect(self) -> None:
        try:
            from mysql.connector import aio as mysql_aio
        except ImportError:
            raise ConfigError(
                "mysql-connector-python is required for MySQL. "
                "Install with: pip install mysql-connector-python"
            ) from None

        options = dict(self._config.options)
        try:
            self._conn = await mysql_aio.connect(
                host=self._config.host,
                port=self._config.port,
                database=self._config.database or None,
                user=self._config.username,
                password=self._config.password or "",
                charset=options.pop("charset", "utf8mb4"),
                connection_timeout=int(self._config.connect_timeout),
                autocommit=True,
                **options,
            )
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to connect to MySQL: {e}",
                cause=e,
            ).with_context(backend="mysql") from e

    async def _disconnect(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def _fetch(self, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        async with await self._conn.cursor(prepared=True, dictionary=True) as cursor:
            await cursor.execute(sql, params)
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def _execute(self, sql: str, params: tuple[Any, ...]) -> UpdateResult:
        async with await self._conn.cursor(prepared=True) as cursor:
            await cursor.execute(sql, params)
            return UpdateResult(
                rows_affected=max(cursor.rowcount, 0),
                insert_id=cursor.lastrowid or 0,
            )

    async def _begin(self) -> None:
        await self._conn.start_transaction()

    async def _commit(self) -> None:
        await self._conn.commit()

    async def _rollback(self) -> None:
        await self._conn.rollback()


__all__ = [
    "MySQLConnection",
]
