"""Database connections -- one operation surface over three backends.

Manifesto:
    Application code must run identically on SQLite (dev, tests),
    PostgreSQL and MySQL (production).  Every connection exposes the same
    template, transaction and CRUD operations; a backend only supplies
    the driver calls underneath them.

    Each backend is **import-guarded**: the driver is only required at
    ``connect()`` time, not at import time.  Install the corresponding extra::

        pip install easydb[postgresql]   # asyncpg
        pip install easydb[mysql]        # mysql-connector-python

Architecture::

    Connection (base.py)             Abstract base: templates, transactions, CRUD
        |-- SQLiteConnection         aiosqlite (always installed)
        |-- PostgreSQLConnection     asyncpg (optional)
        |-- MySQLConnection          mysql.connector.aio (optional)

    ConnectionRegistry (registry.py) Singleton: DatabaseType -> connection class
    DatabaseConfig (types.py)        Dataclass of connection parameters
    DatabaseType (types.py)          Enum of supported backends

Modules
-------
base            Abstract Connection base class
types           DatabaseType enum + DatabaseConfig
registry        ConnectionRegistry singleton + get_connection() factory
sqlite          SQLite connection (aiosqlite)
postgresql      PostgreSQL connection (requires asyncpg)
mysql           MySQL / MariaDB connection (requires mysql-connector-python)

Guardrails:
    ❌ ``conn.exec_query("SELECT * FROM t WHERE id=$id$", {"id": user_input})``
    ✅ ``conn.exec_query("SELECT * FROM t WHERE id=#id#", {"id": user_input})``
    ❌ Importing optional drivers at module scope
    ✅ Import-guarded at ``connect()`` time with clear ``ConfigError``

Tags:
    easydb, database, adapters, multi-backend, import-guarded,
    registry-pattern, postgresql, sqlite, mysql

Doc-Types:
    package-overview, architecture-map, module-index
"""

from easydb.dialect import Dialect, get_dialect

from .base import Connection
from .mysql import MySQLConnection
from .postgresql import PostgreSQLConnection
from .registry import ConnectionRegistry, connection_registry, get_connection
from .sqlite import SQLiteConnection
from .types import DatabaseConfig, DatabaseType

__all__ = [
    # Types
    "DatabaseType",
    "DatabaseConfig",
    # Dialects
    "Dialect",
    "get_dialect",
    # Base class
    "Connection",
    # Implementations
    "SQLiteConnection",
    "PostgreSQLConnection",
    "MySQLConnection",
    # Registry
    "ConnectionRegistry",
    "connection_registry",
    "get_connection",
]
