"""Connection base class — the backend-neutral persistence contract.

Manifesto:
    Callers write ``#escaped#`` / ``$raw$`` templates, condition mappings
    and models once; backends only know how to run a compiled statement
    and how to begin, commit and roll back.  Everything between the two
    (template compilation, WHERE building, pagination, ordering,
    transaction state) lives here and is shared by every backend.

Features:
    - ``exec_query`` / ``exec_update`` over dual-sigil templates
    - ``begin_transaction`` / ``commit`` / ``rollback`` guarded by a
      per-instance state machine, plus a ``transaction()`` context manager
    - ``create`` / ``read`` / ``update`` / ``delete`` / ``list`` over models,
      written only against the five capabilities above
    - Driver hooks are abstract: a backend missing one cannot be built

Architecture::

    Connection (this module)
    ├── exec_query / exec_update  → compile_template → _fetch / _execute
    ├── begin_transaction / commit / rollback → state machine → _begin / _commit / _rollback
    └── create / read / update / delete / list → exec_query / exec_update

    Backends implement: _connect, _disconnect, _fetch, _execute,
                        _begin, _commit, _rollback

Concurrency:
    One instance serves one task at a time. Nothing here locks; use one
    connection per concurrent caller.

Tags:
    easydb, database, abstract-base, adapter-pattern, crud, pagination

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from easydb.dialect import Dialect, get_dialect
from easydb.errors import BackendError, EasyDBError, ValidationError
from easydb.logging import get_logger
from easydb.model import Model, ModelRef, describe
from easydb.result import PageResult, UpdateResult
from easydb.sql.conditions import build_conditions, is_sequence, join_clauses
from easydb.sql.ordering import format_order_by
from easydb.sql.pagination import Pagination, Paginator, page_count
from easydb.sql.pattern import assemble
from easydb.sql.template import Args, CompiledStatement, compile_template
from easydb.transaction import TransactionState, TransactionStateMachine

from .types import DatabaseConfig, DatabaseType

T = TypeVar("T")


class Connection(ABC):
    """
    Abstract base class for database connections.

    Provides the full operation surface; subclasses supply the driver
    hooks.
    """

    def __init__(self, config: DatabaseConfig):
        self._config = config
        self._connected = False
        self._dialect: Dialect = get_dialect(config.db_type.value)
        self._paginator = Paginator(config.default_rpp)
        self._tx = TransactionStateMachine()
        self._log = get_logger(__name__).bind(backend=self._dialect.name)

    # -- Introspection -----------------------------------------------------

    @property
    def dialect(self) -> Dialect:
        """SQL dialect for this connection's database type."""
        return self._dialect

    @property
    def db_type(self) -> DatabaseType:
        return self._config.db_type

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    @property
    def default_rpp(self) -> int:
        return self._paginator.default_rpp

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def transaction_state(self) -> TransactionState:
        return self._tx.state

    @property
    def in_transaction(self) -> bool:
        return self._tx.active

    # -- Driver hooks ------------------------------------------------------

    @abstractmethod
    async def _connect(self) -> None:
        """Open the driver connection."""
        raise NotImplementedError

    @abstractmethod
    async def _disconnect(self) -> None:
        """Close the driver connection."""
        raise NotImplementedError

    @abstractmethod
    async def _fetch(self, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        """Run a compiled SELECT; rows keyed by column name in result order."""
        raise NotImplementedError

    @abstractmethod
    async def _execute(self, sql: str, params: tuple[Any, ...]) -> UpdateResult:
        """Run a compiled INSERT/UPDATE/DELETE; commit unless a transaction is active."""
        raise NotImplementedError

    @abstractmethod
    async def _begin(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def _rollback(self) -> None:
        raise NotImplementedError

    # -- Lifecycle ---------------------------------------------------------

    async def connect(self) -> None:
        """Open the driver connection (no-op when already open)."""
        if self._connected:
            return
        await self._connect()
        self._connected = True
        self._log.debug("connection_opened")

    async def disconnect(self) -> None:
        """Close the driver connection. An open transaction is abandoned (the server rolls it back)."""
        if not self._connected:
            return
        if self._tx.active:
            self._log.warning("transaction_abandoned_on_disconnect")
            self._tx.mark_idle()
        try:
            await self._disconnect()
        finally:
            self._connected = False
            self._log.debug("connection_closed")

    async def __aenter__(self) -> Connection:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    # -- Statements --------------------------------------------------------

    def compile(self, template: str, args: Args = None) -> CompiledStatement:
        """Compile ``template`` for this connection's dialect without running it."""
        return compile_template(template, args, self._dialect)

    async def exec_query(self, template: str, args: Args = None) -> list[dict[str, Any]]:
        """
        Run a query template and return its rows.

        ``#name#`` values are bound as parameters; ``$name$`` values are
        inlined as text. ``args`` is a mapping (by name) or a sequence
        (one value per placeholder occurrence, left to right).

        Returns:
            One dict per row, keyed by result column name in column order.

        Raises:
            TemplateError: Placeholder/argument mismatch (before any I/O).
            BackendError: The driver rejected the statement.
        """
        stmt = self.compile(template, args)
        return await self._run(self._fetch, stmt, args)

    async def exec_update(self, template: str, args: Args = None) -> UpdateResult:
        """
        Run an INSERT/UPDATE/DELETE template.

        Returns:
            ``UpdateResult(rows_affected, insert_id)``; ``insert_id`` is set
            for inserts into auto-increment tables.
        """
        stmt = self.compile(template, args)
        return await self._run(self._execute, stmt, args)

    async def _run(
        self,
        hook: Callable[[str, tuple[Any, ...]], Awaitable[T]],
        stmt: CompiledStatement,
        args: Args,
    ) -> T:
        await self.connect()
        self._log.debug(
            "statement_execute",
            template=stmt.template,
            params=len(stmt.params),
            in_transaction=self._tx.active,
        )
        try:
            return await hook(stmt.sql, stmt.params)
        except EasyDBError:
            raise
        except Exception as e:
            self._log.warning("statement_failed", template=stmt.template, error=str(e))
            raise BackendError(
                f"{self._dialect.name} statement failed: {e}",
                template=stmt.template,
                template_args=args,
                sql=stmt.sql,
                params=stmt.params,
                cause=e,
            ).with_context(backend=self._dialect.name) from e

    # -- Transactions ------------------------------------------------------

    async def begin_transaction(self) -> None:
        """IDLE → ACTIVE. Raises TransactionStateError if already active."""
        self._tx.require_idle("begin")
        await self.connect()
        await self._transition("begin", self._begin)
        self._tx.mark_active()
        self._log.debug("transaction_begin")

    async def commit(self) -> None:
        """ACTIVE → IDLE. A failed COMMIT leaves the transaction active for rollback."""
        self._tx.require_active("commit")
        await self._transition("commit", self._commit)
        self._tx.mark_idle()
        self._log.debug("transaction_commit")

    async def rollback(self) -> None:
        """ACTIVE → IDLE, even when the driver's ROLLBACK fails."""
        self._tx.require_active("rollback")
        try:
            await self._transition("rollback", self._rollback)
        finally:
            self._tx.mark_idle()
            self._log.debug("transaction_rollback")

    async def _transition(self, action: str, hook: Callable[[], Awaitable[None]]) -> None:
        try:
            await hook()
        except EasyDBError:
            raise
        except Exception as e:
            self._log.warning("transaction_failed", action=action, error=str(e))
            raise BackendError(
                f"{self._dialect.name} {action} failed: {e}",
                cause=e,
            ).with_context(backend=self._dialect.name, operation=action) from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Connection]:
        """
        Run a block in a transaction: commit on success, roll back on error.

        Usage:
            async with conn.transaction():
                await conn.create(order)
                await conn.update(stock)
        """
        await self.begin_transaction()
        try:
            yield self
        except BaseException:
            if self._tx.active:
                await self.rollback()
            raise
        else:
            await self.commit()

    # -- CRUD --------------------------------------------------------------

    async def create(self, model: Model) -> UpdateResult:
        """
        Insert ``model`` as a new row.

        With an auto-increment key whose value is ``None`` the key column is
        left to the database; the generated id is returned as
        ``insert_id`` and written back onto ``model``.
        """
        meta = describe(model)
        values = model.column_values()
        generated = meta.auto_increment and values.get(meta.primary_key) is None
        if generated:
            del values[meta.primary_key]
        if not values:
            raise ValidationError(f"Nothing to insert into '{meta.table}'", constraint="values")

        columns = ", ".join(values)
        slots = ", ".join(f"#{c}#" for c in values)
        template = f"INSERT INTO {meta.table} ({columns}) VALUES ({slots})"
        if generated:
            template += self._dialect.returning(meta.primary_key)

        result = await self.exec_update(template, values)
        if generated and result.insert_id:
            setattr(model, meta.primary_key, result.insert_id)
        return result

    async def read(self, model: ModelRef, id: Any) -> Model | dict[str, Any] | None:
        """
        Fetch the row whose primary key equals ``id``.

        Returns:
            A model instance (or the row dict when ``model`` is a bare
            ``ModelMeta``), or ``None`` when no row matches.
        """
        meta = describe(model)
        rows = await self.exec_query(
            f"SELECT {meta.columns} FROM {meta.table} WHERE {meta.primary_key} = #id#",
            {"id": id},
        )
        if not rows:
            return None
        model_cls = _model_class(model)
        return model_cls.from_row(rows[0]) if model_cls else rows[0]

    async def update(self, model: Model) -> UpdateResult:
        """
        Write every non-key field of ``model`` to the row with its primary key.

        ``rows_affected`` is 0 when no row matches.
        """
        meta = describe(model)
        values = model.column_values()
        if values.get(meta.primary_key) is None:
            raise ValidationError(
                f"Cannot update '{meta.table}' without a primary key value",
                field=meta.primary_key,
                constraint="primary_key",
            )
        assignments = ", ".join(f"{c} = #{c}#" for c in values if c != meta.primary_key)
        if not assignments:
            raise ValidationError(f"Nothing to update in '{meta.table}'", constraint="values")
        template = f"UPDATE {meta.table} SET {assignments} WHERE {meta.primary_key} = #{meta.primary_key}#"
        return await self.exec_update(template, values)

    async def delete(self, model: ModelRef, ids: Any = None) -> UpdateResult:
        """
        Delete the rows whose primary key is in ``ids``.

        ``ids`` may be a single value, a sequence or a set; ``None`` means the
        primary key of ``model`` itself. An empty sequence deletes nothing
        and does no I/O.
        """
        meta = describe(model)
        if ids is None:
            if not isinstance(model, Model) or model.pk_value is None:
                raise ValidationError(
                    f"delete() on '{meta.table}' needs ids or a model instance with a primary key",
                    field=meta.primary_key,
                    constraint="ids",
                )
            ids = [model.pk_value]
        elif not is_sequence(ids):
            ids = [ids]

        if not ids:
            return UpdateResult(rows_affected=0, insert_id=0)

        clause, args = join_clauses(build_conditions({meta.primary_key: {"exp": "in", "value": list(ids)}}))
        return await self.exec_update(f"DELETE FROM {meta.table} WHERE {clause}", args)

    async def list(
        self,
        model: ModelRef,
        condition: Mapping[str, Any] | None = None,
        pagination: Pagination | Mapping[str, Any] | None = None,
        order_by: Sequence[str] | None = None,
        condition_pattern: str | None = None,
    ) -> PageResult:
        """
        Page through the rows of ``model``'s table.

        Args:
            condition: ``{field: {"exp": op, "value": v}}`` or ``{field: scalar}``.
            pagination: ``{"page": 1, "rpp": n}``; missing keys use page 1 and
                the connection's ``default_rpp``.
            order_by: ``["field ASC", "other DESC"]``.
            condition_pattern: ``"AND ($a$ OR $b$)"``; each ``$field$`` slot
                gets that field's clause, or ``1 = 1`` when absent.

        Returns:
            ``PageResult(rows, pages, page, rpp, data)`` where ``rows`` and
            ``pages`` describe the whole result and ``data`` is this page.

        Raises:
            ValidationError: Bad condition, pagination, order-by or pattern,
                raised before any query is sent.
        """
        meta = describe(model)
        page = self._paginator.resolve(pagination)
        order = format_order_by(order_by)
        clauses = build_conditions(condition)

        if condition_pattern is not None:
            fragment, args = assemble(condition_pattern, clauses)
            where = f" WHERE 1 = 1 {fragment}"
        else:
            fragment, args = join_clauses(clauses)
            where = f" WHERE {fragment}" if fragment else ""

        count_rows = await self.exec_query(f"SELECT COUNT(*) AS total FROM {meta.table}{where}", args)
        total = int(next(iter(count_rows[0].values()))) if count_rows else 0
        pages = page_count(total, page.rpp)

        data: list[dict[str, Any]] = []
        if page.offset < total:
            data = await self.exec_query(
                f"SELECT {meta.columns} FROM {meta.table}{where}{order} "
                f"{self._dialect.limit_offset(page.limit, page.offset)}",
                args,
            )
        self._log.debug("list_page", table=meta.table, rows=total, page=page.page, returned=len(data))
        return PageResult(rows=total, pages=pages, page=page.page, rpp=page.rpp, data=data)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(connected={self._connected}, "
            f"transaction={self._tx.state.value})"
        )


def _model_class(model: ModelRef) -> type[Model] | None:
    if isinstance(model, Model):
        return type(model)
    if isinstance(model, type) and issubclass(model, Model):
        return model
    return None


__all__ = [
    "Connection",
]
