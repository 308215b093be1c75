"""Database types and configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from easydb.errors import ConfigError


class DatabaseType(str, Enum):
    """Supported database types."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"


DEFAULT_PORTS = {
    DatabaseType.POSTGRESQL: 5432,
    DatabaseType.MYSQL: 3306,
}


@dataclass
class DatabaseConfig:
    """
    Configuration for one connection instance.

    Different fields are used by different database types.
    """

    # Common
    db_type: DatabaseType = DatabaseType.SQLITE

    # SQLite
    path: str | None = None

    # PostgreSQL / MySQL
    host: str = "localhost"
    port: int | None = None
    database: str = ""
    username: str | None = None
    password: str | None = None

    # Timeouts (seconds)
    connect_timeout: float = 10.0
    statement_timeout: float | None = None

    # list() page size when the caller passes no rpp
    default_rpp: int = 20

    # Extra options (driver-specific)
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.db_type, str) and not isinstance(self.db_type, DatabaseType):
            try:
                self.db_type = DatabaseType(self.db_type.lower())
            except ValueError:
                raise ConfigError(f"Unknown database type: {self.db_type}") from None
        if isinstance(self.default_rpp, bool) or not isinstance(self.default_rpp, int) or self.default_rpp <= 0:
            raise ConfigError(f"default_rpp must be a positive integer, got {self.default_rpp!r}")
        if self.port is None:
            self.port = DEFAULT_PORTS.get(self.db_type)


__all__ = [
    "DatabaseType",
    "DatabaseConfig",
]
