"""Tests for the Dialect abstraction layer."""

from __future__ import annotations

import pytest

from easydb.dialect import (
    Dialect,
    MySQLDialect,
    PostgreSQLDialect,
    SQLiteDialect,
    get_dialect,
    register_dialect,
)
from easydb.errors import ConfigError


# =========================================================================
# Fixtures
# =========================================================================


@pytest.fixture(params=["sqlite", "postgresql", "mysql"])
def dialect(request: pytest.FixtureRequest) -> Dialect:
    """Parametric fixture: run each test against every dialect."""
    return get_dialect(request.param)


# =========================================================================
# Protocol conformance
# =========================================================================


class TestProtocol:
    def test_is_dialect(self, dialect):
        assert isinstance(dialect, Dialect)

    def test_limit_offset(self, dialect):
        assert dialect.limit_offset(10, 20) == "LIMIT 10 OFFSET 20"

    def test_placeholders_count(self, dialect):
        assert dialect.placeholders(3).count(",") == 2

    def test_placeholders_zero(self, dialect):
        assert dialect.placeholders(0) == ""


class TestSQLite:
    def test_placeholder(self):
        assert SQLiteDialect().placeholder(5) == "?"

    def test_no_returning(self):
        assert SQLiteDialect().returning("id") == ""

    def test_literal_untouched(self):
        assert SQLiteDialect().escape_literal("LIKE 'a%'") == "LIKE 'a%'"


class TestPostgreSQL:
    def test_numbered_placeholders(self):
        pg = PostgreSQLDialect()
        assert pg.placeholder(0) == "$1"
        assert pg.placeholders(3) == "$1, $2, $3"

    def test_returning(self):
        assert PostgreSQLDialect().returning("id") == " RETURNING id"


class TestMySQL:
    def test_prepared_placeholders(self):
        assert MySQLDialect().placeholders(2) == "?, ?"

    def test_literal_percent_untouched(self):
        assert MySQLDialect().escape_literal("LIKE 'a%'") == "LIKE 'a%'"


class TestRegistry:
    def test_postgres_alias(self):
        assert get_dialect("postgres").name == "postgresql"

    def test_case_insensitive(self):
        assert get_dialect("SQLite").name == "sqlite"

    def test_unknown(self):
        with pytest.raises(ConfigError, match="Unknown dialect"):
            get_dialect("oracle")

    def test_register_custom(self):
        class DuckDialect(SQLiteDialect):
            @property
            def name(self) -> str:
                return "duck"

        register_dialect("Duck", DuckDialect())
        assert get_dialect("duck").name == "duck"
