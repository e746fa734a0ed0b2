"""Pure-function SQL rendering for pending queries.

This module is intentionally free of I/O so that it can be unit-tested
without an executor.

Follows the same pattern as ``state.py``: a frozen dataclass result type
and pure functions that transform data.

WHERE composition: AND-conditions are joined with ``AND``, OR-conditions
with ``OR``. When both groups are present the AND-group is parenthesized,
so ``where(a).where(b).or_where(c)`` renders ``WHERE (a AND b) OR c``.
Placeholders always appear WHERE-group first, matching
``PendingQuery.parameters``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from querychain.entities.shared.errors import InvalidArgumentError
from querychain.entities.shared.state import PendingQuery
from querychain.entities.shared.values import BindValue, bind_values
from querychain.models import ColumnDefinition


@dataclass(frozen=True, slots=True)
class RenderedStatement:
    """A statement ready for execution.

    Attributes:
        sql: SQL text with ``?`` placeholders.
        params: Ordered values matching the ``?`` placeholders in *sql*.
    """

    sql: str
    params: list[BindValue] = field(default_factory=list)


def _require_table(state: PendingQuery) -> str:
    if not state.table:
        raise InvalidArgumentError("No table selected. Call table() before executing a statement.")
    return state.table


def render_where(state: PendingQuery) -> str:
    """Render the WHERE clause (without a leading space) or ``""``."""
    and_group = " AND ".join(state.where_conditions)
    or_group = " OR ".join(state.or_where_conditions)

    if and_group and or_group:
        return f"WHERE ({and_group}) OR {or_group}"
    if and_group:
        return f"WHERE {and_group}"
    if or_group:
        return f"WHERE {or_group}"
    return ""


def _join_parts(parts: list[str]) -> str:
    return " ".join(part for part in parts if part)


def render_select(state: PendingQuery) -> RenderedStatement:
    """Render ``SELECT`` with clauses in fixed order regardless of call order.

    Args:
        state: The pending query.

    Returns:
        The rendered statement and its condition parameters.
    """
    table = _require_table(state)
    columns = ", ".join(state.select_columns) if state.select_columns else "*"

    sql = _join_parts([
        f"SELECT {columns} FROM {table}",
        " ".join(state.joins),
        render_where(state),
        state.group_by_clause,
        state.order_by_clause,
        state.limit_clause,
    ])
    return RenderedStatement(sql=sql, params=list(state.parameters))


def _normalize_rows(data: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Return insert rows as a list, validating that all rows share one shape."""
    if isinstance(data, Mapping):
        rows = [data]
    elif isinstance(data, (list, tuple)):
        rows = list(data)
    else:
        raise InvalidArgumentError(
            f"insert() expects a mapping or a list of mappings, got {type(data).__name__}"
        )

    if not rows:
        raise InvalidArgumentError("insert() requires at least one row")

    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise InvalidArgumentError(f"Row {index} is {type(row).__name__}, expected a mapping")
        if not row:
            raise InvalidArgumentError(f"Row {index} has no columns")

    columns = set(rows[0])
    for index, row in enumerate(rows[1:], start=1):
        if set(row) != columns:
            raise InvalidArgumentError(
                f"Row {index} columns {sorted(row)} do not match row 0 columns {sorted(columns)}"
            )
    return rows


def render_insert(
    state: PendingQuery,
    data: Mapping[str, Any] | Sequence[Mapping[str, Any]],
) -> RenderedStatement:
    """Render a single- or multi-row ``INSERT``.

    Column order follows the first row's key order; parameters are
    flattened row-major. Condition state is ignored.

    Args:
        state: The pending query (only ``table`` is used).
        data: One mapping, or a list/tuple of mappings with identical keys.

    Returns:
        The rendered statement and its row parameters.

    Raises:
        InvalidArgumentError: For empty data or rows with different columns.
    """
    table = _require_table(state)
    rows = _normalize_rows(data)
    columns = list(rows[0])

    group = "(" + ", ".join("?" for _ in columns) + ")"
    values_sql = ", ".join(group for _ in rows)
    params: list[BindValue] = []
    for row in rows:
        params.extend(bind_values(row[col] for col in columns))

    sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES {values_sql}"
    return RenderedStatement(sql=sql, params=params)


def render_update(state: PendingQuery, data: Mapping[str, Any]) -> RenderedStatement:
    """Render ``UPDATE ... SET ... [WHERE ...]``.

    Parameters are the SET values first, then the condition parameters.
    GROUP BY, ORDER BY and LIMIT are not applied.
    """
    table = _require_table(state)
    if not isinstance(data, Mapping) or not data:
        raise InvalidArgumentError("update() requires a non-empty mapping of column values")

    assignments = ", ".join(f"{col} = ?" for col in data)
    params = [*bind_values(data.values()), *state.parameters]
    sql = _join_parts([f"UPDATE {table} SET {assignments}", render_where(state)])
    return RenderedStatement(sql=sql, params=params)


def render_delete(state: PendingQuery) -> RenderedStatement:
    table = _require_table(state)
    sql = _join_parts([f"DELETE FROM {table}", render_where(state)])
    return RenderedStatement(sql=sql, params=list(state.parameters))


# ── Schema DDL ───────────────────────────────────────────────────────────


def render_create_database(
    name: str,
    charset: str = "utf8mb4",
    collation: str = "utf8mb4_unicode_ci",
) -> RenderedStatement:
    sql = f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET {charset} COLLATE {collation}"
    return RenderedStatement(sql=sql)


def _render_column(name: str, column: ColumnDefinition) -> str:
    parts = [f"`{name}` {column.type}"]
    if column.length:
        parts[0] += f"({column.length})"
    if column.not_null:
        parts.append("NOT NULL")
    if column.auto_increment:
        parts.append("AUTO_INCREMENT")
    if column.primary_key:
        parts.append("PRIMARY KEY")
    if column.unique:
        parts.append("UNIQUE")
    # An explicit None renders DEFAULT NULL; an omitted default renders nothing
    if "default" in column.model_fields_set:
        default = "NULL" if column.default is None else column.default
        parts.append(f"DEFAULT {default}")
    return " ".join(parts)


def render_create_table(
    name: str,
    schema: Mapping[str, ColumnDefinition | Mapping[str, Any]],
) -> RenderedStatement:
    """Render ``CREATE TABLE IF NOT EXISTS`` from a declarative schema.

    Args:
        name: Table name.
        schema: Column name → ``ColumnDefinition`` (or a dict validated into one).

    Returns:
        The rendered DDL statement (no parameters).

    Raises:
        InvalidArgumentError: If the schema is empty or a definition is invalid.
    """
    if not schema:
        raise InvalidArgumentError(f"Schema for table '{name}' defines no columns")

    columns: list[str] = []
    for column_name, definition in schema.items():
        if not isinstance(definition, ColumnDefinition):
            try:
                definition = ColumnDefinition.model_validate(definition)
            except ValueError as e:
                raise InvalidArgumentError(f"Invalid definition for column '{column_name}': {e}") from e
        columns.append(_render_column(column_name, definition))

    sql = f"CREATE TABLE IF NOT EXISTS `{name}` ({', '.join(columns)})"
    return RenderedStatement(sql=sql)
