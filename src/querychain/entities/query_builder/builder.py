"""Fluent query builder.

Chained calls accumulate a ``PendingQuery``; a terminal coroutine
(``get``, ``first``, ``insert``, ``update``, ``delete``) renders it, runs it
through the ``SqlExecutor`` and, on success only, resets the builder to an
empty state.

One statement is under construction per builder at a time. Callers that
need concurrent statements use separate builders, which may share one
executor.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from querychain.config import Settings, get_settings
from querychain.entities.shared.errors import ConnectionNotEstablishedError
from querychain.entities.shared.protocols import SqlExecutor
from querychain.entities.shared.rendering import (
    RenderedStatement,
    render_create_database,
    render_create_table,
    render_delete,
    render_insert,
    render_select,
    render_update,
)
from querychain.entities.shared.state import (
    PendingQuery,
    empty_state,
    with_group_by,
    with_join,
    with_limit,
    with_or_where,
    with_order_by,
    with_raw_where,
    with_select,
    with_table,
    with_where,
    with_where_in,
)
from querychain.entities.shared.values import bind_values
from querychain.models import ColumnDefinition, ExecutionResult

if TYPE_CHECKING:
    from querychain.entities.shared.clients import AsyncSqlClient

logger = logging.getLogger(__name__)


class QueryBuilder:
    """Fluent facade over a ``SqlExecutor``.

    Usage::

        async with QueryBuilder() as db:
            users = await db.table("users").where("status", "active").get()
            new_id = await db.table("users").insert({"name": "John"})

    Args:
        executor: An already-connected executor. When omitted, ``connect()``
            opens an ``AsyncSqlClient`` built from *settings*.
        settings: Connection settings. Defaults to ``get_settings()``.
    """

    def __init__(self, executor: SqlExecutor | None = None, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._executor = executor
        self._owned_client: AsyncSqlClient | None = None
        self._state = empty_state()
        self._last_query = ""

    # ── Connection lifecycle ────────────────────────────────────────────

    @property
    def is_connected(self) -> bool:
        return self._executor is not None

    async def connect(self) -> QueryBuilder:
        """Open a connection unless an executor is already attached."""
        if self._executor is not None:
            return self
        # Deferred so the builder imports without an ODBC driver manager installed
        from querychain.entities.shared.clients import AsyncSqlClient

        client = AsyncSqlClient(self._settings)
        await client.connect()
        self._owned_client = client
        self._executor = client
        return self

    async def disconnect(self) -> None:
        """Detach the executor, closing it if this builder opened it."""
        if self._owned_client is not None:
            await self._owned_client.close()
            self._owned_client = None
        self._executor = None

    async def __aenter__(self) -> QueryBuilder:
        return await self.connect()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    def _require_executor(self) -> SqlExecutor:
        if self._executor is None:
            raise ConnectionNotEstablishedError()
        return self._executor

    # ── State accumulation ──────────────────────────────────────────────

    @property
    def state(self) -> PendingQuery:
        """Snapshot of the statement under construction."""
        return self._state

    @property
    def last_query(self) -> str:
        """SQL text of the most recent terminal statement.

        ``execute_raw``, ``create_database`` and ``create_table`` leave it
        untouched.
        """
        return self._last_query

    def reset(self) -> QueryBuilder:
        """Discard the pending statement without executing it."""
        self._state = empty_state()
        return self

    def table(self, name: str) -> QueryBuilder:
        self._state = with_table(self._state, name)
        return self

    def select(self, *columns: str) -> QueryBuilder:
        """Set the selected columns, replacing any earlier ``select()``."""
        self._state = with_select(self._state, columns)
        return self

    def join(self, table: str, condition: str, join_type: str | None = None) -> QueryBuilder:
        """Append ``[<join_type>] JOIN table ON condition``.

        The condition is inserted verbatim; it should reference columns,
        never user-supplied values.
        """
        self._state = with_join(self._state, table, condition, join_type)
        return self

    def where(self, column: str, value: Any, operator: str = "=") -> QueryBuilder:
        self._state = with_where(self._state, column, value, operator)
        return self

    def or_where(self, column: str, value: Any, operator: str = "=") -> QueryBuilder:
        self._state = with_or_where(self._state, column, value, operator)
        return self

    def where_in(self, column: str, values: Sequence[Any]) -> QueryBuilder:
        """Add ``column IN (?, ...)``. Empty or non-sequence *values* are ignored."""
        self._state = with_where_in(self._state, column, values)
        return self

    def raw_where(self, fragment: str) -> QueryBuilder:
        """Add an unparameterized condition. The caller must keep it injection-safe."""
        self._state = with_raw_where(self._state, fragment)
        return self

    def group_by(self, column: str) -> QueryBuilder:
        self._state = with_group_by(self._state, column)
        return self

    def order_by(self, column: str, direction: str) -> QueryBuilder:
        self._state = with_order_by(self._state, column, direction)
        return self

    def limit(self, count: int) -> QueryBuilder:
        self._state = with_limit(self._state, count)
        return self

    # ── Execution ───────────────────────────────────────────────────────

    async def _run(self, executor: SqlExecutor, statement: RenderedStatement) -> ExecutionResult:
        """Execute *statement*; failures propagate unchanged after logging."""
        log = logger.info if self._settings.log_sql else logger.debug
        log("Executing: %s", statement.sql)

        try:
            return await executor.execute(statement.sql, statement.params)
        except Exception as e:
            logger.error("Error executing query: %s", e)
            raise

    async def _run_terminal(self, executor: SqlExecutor, statement: RenderedStatement) -> ExecutionResult:
        # Set before executing so it also reflects a failed attempt
        self._last_query = statement.sql
        result = await self._run(executor, statement)
        self._state = empty_state()
        return result

    async def get(self) -> list[dict[str, Any]]:
        """Run the pending SELECT and return its rows."""
        executor = self._require_executor()
        statement = render_select(self._state)
        result = await self._run_terminal(executor, statement)
        return result.rows

    async def first(self) -> dict[str, Any] | None:
        """Run the pending SELECT with ``LIMIT 1`` and return the row or ``None``.

        Any earlier ``limit()`` is overridden.
        """
        executor = self._require_executor()
        statement = render_select(with_limit(self._state, 1))
        result = await self._run_terminal(executor, statement)
        return result.rows[0] if result.rows else None

    async def insert(self, data: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> int | None:
        """Insert one row (a mapping) or several (a list of mappings).

        Returns:
            The generated key reported by the executor, or ``None``.
        """
        executor = self._require_executor()
        statement = render_insert(self._state, data)
        result = await self._run_terminal(executor, statement)
        return result.insert_id

    async def update(self, data: Mapping[str, Any]) -> bool:
        """Update matching rows; True iff at least one row changed."""
        executor = self._require_executor()
        statement = render_update(self._state, data)
        result = await self._run_terminal(executor, statement)
        return result.affected_rows > 0

    async def delete(self) -> bool:
        """Delete matching rows; True iff at least one row was removed."""
        executor = self._require_executor()
        statement = render_delete(self._state)
        result = await self._run_terminal(executor, statement)
        return result.affected_rows > 0

    # ── Pass-throughs ───────────────────────────────────────────────────

    async def execute_raw(self, sql: str, params: Sequence[Any] | None = None) -> ExecutionResult:
        """Run arbitrary SQL. The pending statement is left untouched."""
        executor = self._require_executor()
        statement = RenderedStatement(sql=sql, params=list(bind_values(params or ())))
        return await self._run(executor, statement)

    async def create_database(
        self,
        name: str,
        charset: str = "utf8mb4",
        collation: str = "utf8mb4_unicode_ci",
    ) -> bool:
        executor = self._require_executor()
        await self._run(executor, render_create_database(name, charset, collation))
        return True

    async def create_table(
        self,
        name: str,
        schema: Mapping[str, ColumnDefinition | Mapping[str, Any]],
    ) -> bool:
        """Create *name* from a declarative column schema if it does not exist."""
        executor = self._require_executor()
        await self._run(executor, render_create_table(name, schema))
        return True

    async def start_transaction(self) -> None:
        await self._require_executor().begin_transaction()

    async def commit(self) -> None:
        await self._require_executor().commit()

    async def rollback(self) -> None:
        await self._require_executor().rollback()
