"""Connection factory — create connections from URL strings.

This is the **single entry point** for wiring a connection from
configuration.  Application code that only knows a database URL should
use ``create_connection()`` rather than importing backend classes
directly; code that already knows the backend can use
:func:`easydb.adapters.get_connection`.

Supported URL schemes
---------------------
==================  ==========================================  ============
Scheme              Example                                     Backend
==================  ==========================================  ============
``memory``          ``memory`` or ``:memory:`` or ``None``       SQLite RAM
``sqlite``          ``sqlite:///path/to/file.db``                SQLite file
``(file path)``     ``./data/my.db`` or ``/tmp/app.db``          SQLite file
``postgresql``      ``postgresql://user:pw@host:port/db``        PostgreSQL
``postgres``        ``postgres://user:pw@host:port/db``          PostgreSQL
``mysql``           ``mysql://user:pw@host:port/db``             MySQL
==================  ==========================================  ============

Driver suffixes (``postgresql+asyncpg://``, ``mysql+mysqlconnector://``) are
accepted and ignored.

Usage
-----
::

    from easydb.connection import create_connection

    async with create_connection("sqlite:///app.db") as conn:
        page = await conn.list(User, pagination={"page": 1})

    # Settings-driven (EASYDB_DATABASE_URL, EASYDB_DEFAULT_RPP, ...)
    conn = create_connection()

``create_connection()`` returns an unconnected :class:`Connection`; the
first operation (or ``async with``) opens it.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import unquote, urlsplit

from easydb.adapters.base import Connection
from easydb.adapters.registry import get_connection
from easydb.adapters.types import DatabaseType
from easydb.errors import ConfigError
from easydb.logging import get_logger
from easydb.settings import EasyDBSettings, get_settings

logger = get_logger(__name__)

_NETWORK_SCHEMES = {
    "postgresql": DatabaseType.POSTGRESQL,
    "postgres": DatabaseType.POSTGRESQL,
    "mysql": DatabaseType.MYSQL,
}


# ── URL parsing ──────────────────────────────────────────────────────────


def _parse_url(db: str | None) -> tuple[str, str]:
    """Parse a database URL into (scheme, target).

    Returns
    -------
    tuple[str, str]
        (scheme, target) where scheme is one of:
        ``"memory"``, ``"sqlite"``, ``"postgresql"``, ``"mysql"``, ``"file"``.
    """
    if db is None or db in ("", "memory", ":memory:"):
        return "memory", ":memory:"

    if db.startswith("sqlite://"):
        # sqlite:///relative.db, sqlite:////absolute.db, sqlite://
        path = db[len("sqlite://"):]
        if path.startswith("/"):
            path = path[1:]
        if not path or path == ":memory:":
            return "memory", ":memory:"
        return "sqlite", path

    if "://" in db:
        scheme, rest = db.split("://", 1)
        base = scheme.split("+", 1)[0].lower()
        if base in _NETWORK_SCHEMES:
            return _NETWORK_SCHEMES[base].value, f"{base}://{rest}"
        raise ConfigError(f"Unsupported database URL scheme: {scheme!r}")

    # Bare file path: SQLite file
    return "file", db


def _network_kwargs(url: str) -> dict[str, Any]:
    """Host/port/database/credentials from a ``scheme://user:pw@host:port/db`` URL."""
    parts = urlsplit(url)
    try:
        port = parts.port
    except ValueError as e:
        raise ConfigError(f"Invalid port in database URL: {e}") from e

    kwargs: dict[str, Any] = {
        "host": parts.hostname or "localhost",
        "database": unquote(parts.path.lstrip("/")),
        "username": unquote(parts.username) if parts.username else None,
        "password": unquote(parts.password) if parts.password else None,
    }
    if port is not None:
        kwargs["port"] = port
    return kwargs


# ── Main factory ─────────────────────────────────────────────────────────


def create_connection(
    url: str | None = None,
    *,
    settings: EasyDBSettings | None = None,
    **overrides: Any,
) -> Connection:
    """Create a connection from a URL, path, or keyword.

    Parameters
    ----------
    url:
        Database URL, file path, or keyword.  ``None`` uses
        ``settings.database_url``.
    settings:
        Source of ``default_rpp`` and timeouts.  Defaults to
        :func:`easydb.settings.get_settings`.
    overrides:
        Extra keyword arguments for the backend class (they win over
        values taken from the URL and settings).

    Raises
    ------
    ConfigError
        Unsupported scheme, malformed URL, or unknown backend.
    """
    settings = settings or get_settings()
    scheme, target = _parse_url(url if url is not None else settings.database_url)

    kwargs: dict[str, Any] = {"default_rpp": settings.default_rpp}

    if scheme in ("memory", "sqlite", "file"):
        kwargs.update(path=target, timeout=settings.connect_timeout)
        backend = DatabaseType.SQLITE
    else:
        kwargs.update(_network_kwargs(target))
        kwargs["connect_timeout"] = settings.connect_timeout
        backend = DatabaseType(scheme)
        if backend is DatabaseType.POSTGRESQL:
            kwargs["statement_timeout"] = settings.statement_timeout

    kwargs.update(overrides)
    logger.debug("connection_created", backend=backend.value, scheme=scheme)
    return get_connection(backend, **kwargs)


__all__ = [
    "Connection",
    "create_connection",
]
