"""easydb -- backend-agnostic async persistence: templates, transactions, CRUD.

Manifesto:
    Application code should write a query once and run it on SQLite in
    tests and on PostgreSQL or MySQL in production.  easydb gives every
    backend the same small surface: parameterized templates, explicit
    transactions, and a generic CRUD-plus-list protocol over models.

    - **Injection-safe by default:** ``#name#`` is always a bound parameter
    - **Stable SQL:** condition patterns keep one template across optional filters
    - **Consistent pages:** ``list()`` returns row and page totals with the data
    - **Import-guarded drivers:** asyncpg and mysql-connector are loaded lazily

Architecture::

    Layer 1 -- Errors, Config, Logging
        errors.py          EasyDBError hierarchy (Template/Validation/Transaction/Backend/Config)
        settings.py        EasyDBSettings (pydantic-settings, EASYDB_ env prefix)
        logging.py         structlog configuration + context binding

    Layer 2 -- Pure SQL builders
        dialect.py         Placeholder / LIMIT / RETURNING per backend
        sql/template.py    Dual-sigil template compiler
        sql/conditions.py  Condition mapping -> WHERE fragments
        sql/pattern.py     ``AND $field$`` pattern assembler
        sql/pagination.py  Page request -> offset/limit, totals -> pages
        sql/ordering.py    ``"field DIRECTION"`` -> ORDER BY

    Layer 3 -- Connections
        transaction.py     IDLE/ACTIVE state machine
        model.py           pydantic Model base + ModelMeta
        result.py          UpdateResult, PageResult
        adapters/          Connection ABC + SQLite / PostgreSQL / MySQL backends
        connection.py      create_connection(url) factory

    Layer 4 -- CLI
        cli/               ``easydb render | query | exec``

Examples:
    >>> from easydb import Model, create_connection
    >>> class User(Model):
    ...     table_name = "users"
    ...     id: int | None = None
    ...     name: str
    >>> async def main():
    ...     async with create_connection("sqlite:///app.db") as conn:
    ...         await conn.create(User(name="O'Brien"))
    ...         return await conn.list(User, order_by=["name ASC"])

Tags:
    easydb, database, async, sql, templates, crud, pagination

Doc-Types:
    package-overview, architecture-map
"""

__version__ = "0.1.0"

from easydb.adapters import (
    Connection,
    ConnectionRegistry,
    DatabaseConfig,
    DatabaseType,
    MySQLConnection,
    PostgreSQLConnection,
    SQLiteConnection,
    connection_registry,
    get_connection,
)
from easydb.connection import create_connection
from easydb.errors import (
    BackendError,
    ConfigError,
    DatabaseConnectionError,
    EasyDBError,
    ErrorCategory,
    TemplateError,
    TransactionStateError,
    ValidationError,
)
from easydb.model import Model, ModelMeta
from easydb.result import PageResult, UpdateResult
from easydb.sql.pagination import Pagination
from easydb.transaction import TransactionState

__all__ = [
    "__version__",
    # Connections
    "Connection",
    "SQLiteConnection",
    "PostgreSQLConnection",
    "MySQLConnection",
    "ConnectionRegistry",
    "connection_registry",
    "get_connection",
    "create_connection",
    "DatabaseConfig",
    "DatabaseType",
    # Models / results
    "Model",
    "ModelMeta",
    "Pagination",
    "PageResult",
    "UpdateResult",
    "TransactionState",
    # Errors
    "EasyDBError",
    "ErrorCategory",
    "TemplateError",
    "ValidationError",
    "TransactionStateError",
    "BackendError",
    "DatabaseConnectionError",
    "ConfigError",
]
