"""SQL dialect abstraction for backend-neutral statement generation.

The template compiler and the CRUD dispatcher never write a
driver-specific token themselves.  They ask a ``Dialect`` for the bind
placeholder, the LIMIT/OFFSET tail, and the ``RETURNING`` suffix.

Manifesto:
    The same ``#name#`` template must run on SQLite, PostgreSQL and MySQL.
    The only things that differ between them at this layer are the
    paramstyle of the driver and two small pieces of syntax, so that is
    all a dialect describes.

Architecture::

    ┌──────────────┐ ┌──────────────────┐ ┌──────────────┐
    │ SQLite       │ │ PostgreSQL       │ │ MySQL        │
    │ aiosqlite    │ │ asyncpg          │ │ mysql-conn.  │
    │ ?, ?, ?      │ │ $1, $2, $3       │ │ ?, ?, ?      │
    │              │ │ RETURNING id     │ │ (prepared)   │
    └──────────────┘ └──────────────────┘ └──────────────┘

Examples:
    >>> from easydb.dialect import get_dialect
    >>> d = get_dialect("postgresql")
    >>> d.placeholders(3)
    '$1, $2, $3'
    >>> d.limit_offset(10, 20)
    'LIMIT 10 OFFSET 20'

Guardrails:
    ❌ DON'T: Hard-code ``?`` in connection code
    ✅ DO: Use ``dialect.placeholder(index)``

Tags:
    dialect, sql, abstraction, portability, easydb

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from easydb.errors import ConfigError


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract.

    Every method returns a SQL fragment valid for the target driver.
    """

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlite'``)."""
        ...

    def placeholder(self, index: int) -> str:
        """Single bind placeholder for the 0-based parameter ``index``.

        ``index`` is ignored by anonymous styles (``?``, ``%s``) but
        required by numbered ones (asyncpg ``$1``).
        """
        ...

    def placeholders(self, count: int) -> str:
        """Comma-separated placeholder list for ``count`` parameters."""
        ...

    def escape_literal(self, text: str) -> str:
        """Escape literal SQL text for the driver's paramstyle."""
        ...

    def limit_offset(self, limit: int, offset: int) -> str:
        """Pagination tail appended after ORDER BY."""
        ...

    def returning(self, column: str) -> str:
        """Suffix that makes an INSERT return the generated key, or ``''``."""
        ...


# =========================================================================
# Concrete Dialect Implementations
# =========================================================================


class SQLiteDialect:
    """SQLite dialect — ``?`` placeholders, key via ``cursor.lastrowid``."""

    @property
    def name(self) -> str:
        return "sqlite"

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "?"

    def placeholders(self, count: int) -> str:
        return ", ".join("?" for _ in range(count))

    def escape_literal(self, text: str) -> str:
        return text

    def limit_offset(self, limit: int, offset: int) -> str:
        return f"LIMIT {int(limit)} OFFSET {int(offset)}"

    def returning(self, column: str) -> str:  # noqa: ARG002
        return ""


class PostgreSQLDialect:
    """PostgreSQL dialect — asyncpg ``$1`` numbered placeholders.

    asyncpg has no ``lastrowid``; generated keys come back through
    ``INSERT ... RETURNING``.
    """

    @property
    def name(self) -> str:
        return "postgresql"

    def placeholder(self, index: int) -> str:
        return f"${index + 1}"

    def placeholders(self, count: int) -> str:
        return ", ".join(f"${i + 1}" for i in range(count))

    def escape_literal(self, text: str) -> str:
        return text

    def limit_offset(self, limit: int, offset: int) -> str:
        return f"LIMIT {int(limit)} OFFSET {int(offset)}"

    def returning(self, column: str) -> str:
        return f" RETURNING {column}"


class MySQLDialect:
    """MySQL dialect — ``?`` placeholders for server-side prepared statements.

    The connection runs every statement through a prepared cursor, so the
    server binds parameters and the driver never rewrites the SQL text.
    Literal ``%`` (``LIKE '%s%'``, ``DATE_FORMAT(ts, '%H:%i:%s')``) needs
    no escaping.
    """

    @property
    def name(self) -> str:
        return "mysql"

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "?"

    def placeholders(self, count: int) -> str:
        return ", ".join("?" for _ in range(count))

    def escape_literal(self, text: str) -> str:
        return text

    def limit_offset(self, limit: int, offset: int) -> str:
        return f"LIMIT {int(limit)} OFFSET {int(offset)}"

    def returning(self, column: str) -> str:  # noqa: ARG002
        return ""


# =========================================================================
# Registry / Factory
# =========================================================================

# Dialects are stateless
_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),  # alias
    "mysql": MySQLDialect(),
}


def get_dialect(db_type: str) -> Dialect:
    """Get a dialect by database type name.

    Raises:
        ConfigError: If ``db_type`` is not recognised.
    """
    key = db_type.lower() if isinstance(db_type, str) else db_type.value
    if key not in _DIALECTS:
        raise ConfigError(
            f"Unknown dialect '{db_type}'. "
            f"Supported: {sorted(set(_DIALECTS) - {'postgres'})}"
        )
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect implementation (third-party drivers, test doubles)."""
    _DIALECTS[name.lower()] = dialect


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "get_dialect",
    "register_dialect",
]
