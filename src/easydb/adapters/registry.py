"""Connection registry and factory.

Manifesto:
    Consumers should never hard-code connection class names.  The registry
    maps ``DatabaseType`` strings to connection classes and the
    ``get_connection()`` factory creates a configured instance.

Features:
    - ``ConnectionRegistry`` singleton with pre-registered defaults
    - ``register()`` for custom / third-party backends
    - ``get_connection()`` factory: type + keyword config → connection

Tags:
    easydb, database, registry, factory, singleton

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

from easydb.errors import ConfigError

from .base import Connection
from .mysql import MySQLConnection
from .postgresql import PostgreSQLConnection
from .sqlite import SQLiteConnection
from .types import DatabaseType


class ConnectionRegistry:
    """
    Registry for connection classes.

    Pre-registered backends:
    - ``sqlite`` — :class:`SQLiteConnection`
    - ``postgresql`` / ``postgres`` — :class:`PostgreSQLConnection`
    - ``mysql`` — :class:`MySQLConnection`
    """

    def __init__(self):
        self._factories: dict[str, type[Connection]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self._factories["sqlite"] = SQLiteConnection
        self._factories["postgresql"] = PostgreSQLConnection
        self._factories["postgres"] = PostgreSQLConnection  # Alias
        self._factories["mysql"] = MySQLConnection

    def register(self, name: str, connection_class: type[Connection]) -> None:
        """Register a connection class under ``name``."""
        self._factories[name.lower()] = connection_class

    def create(self, name: str, **kwargs: Any) -> Connection:
        """Create a (not yet connected) connection by backend name."""
        name = name.lower()
        if name not in self._factories:
            raise ConfigError(f"Unknown database backend: {name}")
        return self._factories[name](**kwargs)

    def list_backends(self) -> list[str]:
        """List registered backend names."""
        return sorted(self._factories.keys())


# Global registry
connection_registry = ConnectionRegistry()


def get_connection(
    db_type: DatabaseType | str,
    **kwargs: Any,
) -> Connection:
    """
    Get a connection by database type.

    Usage:
        conn = get_connection(DatabaseType.SQLITE, path="data.db")
        conn = get_connection("postgresql", host="localhost", database="app")
    """
    if isinstance(db_type, DatabaseType):
        name = db_type.value
    else:
        name = db_type

    return connection_registry.create(name, **kwargs)


__all__ = [
    "ConnectionRegistry",
    "connection_registry",
    "get_connection",
]
