"""
Tests for PostgreSQLConnection with asyncpg mocked out.

Verifies the driver calls the connection makes: numbered parameters,
RETURNING for generated keys, status-string row counts and the
asyncpg transaction object.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from easydb import PostgreSQLConnection
from easydb.adapters.postgresql import _status_count
from easydb.errors import BackendError, DatabaseConnectionError
from tests._support import User


@pytest.fixture
def driver():
    """Fake asyncpg connection."""
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.execute = AsyncMock(return_value="UPDATE 0")
    conn.close = AsyncMock()
    txn = MagicMock()
    txn.start = AsyncMock()
    txn.commit = AsyncMock()
    txn.rollback = AsyncMock()
    conn.transaction.return_value = txn
    return conn


@pytest.fixture
def connect(driver):
    with patch("asyncpg.connect", new=AsyncMock(return_value=driver)) as mock:
        yield mock


@pytest.fixture
def pg(connect):
    return PostgreSQLConnection(
        host="db.internal",
        port=6543,
        database="app",
        username="svc",
        password="secret",
        connect_timeout=3.0,
        statement_timeout=30.0,
    )


class TestConnect:
    @pytest.mark.asyncio
    async def test_passes_config_to_driver(self, pg, connect):
        await pg.connect()

        connect.assert_awaited_once_with(
            host="db.internal",
            port=6543,
            database="app",
            user="svc",
            password="secret",
            timeout=3.0,
            command_timeout=30.0,
        )
        assert pg.is_connected

    @pytest.mark.asyncio
    async def test_connect_failure(self):
        with patch("asyncpg.connect", new=AsyncMock(side_effect=OSError("refused"))):
            conn = PostgreSQLConnection(host="nowhere")
            with pytest.raises(DatabaseConnectionError) as exc_info:
                await conn.connect()

        assert exc_info.value.retryable
        assert exc_info.value.context.backend == "postgresql"
        assert not conn.is_connected

    @pytest.mark.asyncio
    async def test_disconnect_closes(self, pg, driver):
        await pg.connect()
        await pg.disconnect()
        driver.close.assert_awaited_once()


class TestStatements:
    @pytest.mark.asyncio
    async def test_query_uses_numbered_parameters(self, pg, driver):
        driver.fetch.return_value = [{"id": 1, "name": "Alice"}]

        rows = await pg.exec_query("SELECT id, name FROM users WHERE status = #s# AND age > #a#", ["active", 20])

        driver.fetch.assert_awaited_once_with("SELECT id, name FROM users WHERE status = $1 AND age > $2", "active", 20)
        assert rows == [{"id": 1, "name": "Alice"}]

    @pytest.mark.asyncio
    async def test_update_counts_from_status(self, pg, driver):
        driver.execute.return_value = "DELETE 3"

        result = await pg.exec_update("DELETE FROM users WHERE status = #s#", {"s": "disabled"})

        driver.execute.assert_awaited_once_with("DELETE FROM users WHERE status = $1", "disabled")
        assert result.rows_affected == 3
        assert result.insert_id == 0

    @pytest.mark.asyncio
    async def test_insert_status_count(self, pg, driver):
        driver.execute.return_value = "INSERT 0 2"
        result = await pg.exec_update("INSERT INTO tags (slug, label) VALUES ('a', 'A'), ('b', 'B')")
        assert result.rows_affected == 2

    @pytest.mark.asyncio
    async def test_create_reads_returning(self, pg, driver):
        driver.fetch.return_value = [(17,)]
        user = User(name="Zed")

        result = await pg.create(user)

        sql = driver.fetch.await_args.args[0]
        assert sql.endswith(" RETURNING id")
        driver.execute.assert_not_awaited()
        assert result.insert_id == 17
        assert user.id == 17

    @pytest.mark.asyncio
    async def test_driver_error_wrapped(self, pg, driver):
        driver.fetch.side_effect = RuntimeError('relation "nope" does not exist')

        with pytest.raises(BackendError) as exc_info:
            await pg.exec_query("SELECT * FROM nope")

        assert exc_info.value.sql == "SELECT * FROM nope"
        assert exc_info.value.context.backend == "postgresql"


class TestTransactions:
    @pytest.mark.asyncio
    async def test_begin_commit(self, pg, driver):
        txn = driver.transaction.return_value

        await pg.begin_transaction()
        await pg.commit()

        txn.start.assert_awaited_once()
        txn.commit.assert_awaited_once()
        txn.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_begin_rollback(self, pg, driver):
        txn = driver.transaction.return_value

        async with pg.transaction():
            pass
        with pytest.raises(ValueError):
            async with pg.transaction():
                raise ValueError("undo")

        assert txn.start.await_count == 2
        txn.commit.assert_awaited_once()
        txn.rollback.assert_awaited_once()
        assert not pg.in_transaction


@pytest.mark.parametrize(
    ("status", "expected"),
    [("UPDATE 4", 4), ("INSERT 0 1", 1), ("CREATE TABLE", 0), ("", 0), (None, 0)],
)
def test_status_count(status, expected):
    assert _status_count(status) == expected
