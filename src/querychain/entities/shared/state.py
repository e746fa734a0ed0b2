"""Pending-query state and its pure transitions.

``PendingQuery`` is an immutable value. Every builder call produces a new
value through one of the functions below; the builder only ever swaps the
reference it holds. A failed execution therefore cannot leave a half-
mutated statement behind.

This module is free of I/O so it can be unit-tested without fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from querychain.entities.shared.values import BindValue, bind_value, bind_values, is_value_sequence


@dataclass(frozen=True, slots=True)
class PendingQuery:
    """Accumulated shape of the statement under construction.

    Attributes:
        table: Target relation; empty until ``table()`` is called.
        joins: Rendered join clauses in call order.
        select_columns: Column expressions; empty renders as ``*``.
        where_conditions: Fragments joined with ``AND``.
        or_where_conditions: Fragments joined with ``OR``.
        group_by_clause: Rendered ``GROUP BY`` text or ``""``.
        order_by_clause: Rendered ``ORDER BY`` text or ``""``.
        limit_clause: Rendered ``LIMIT`` text or ``""``.
        where_parameters: Values bound by *where_conditions*, in order.
        or_where_parameters: Values bound by *or_where_conditions*, in order.
    """

    table: str = ""
    joins: tuple[str, ...] = ()
    select_columns: tuple[str, ...] = ()
    where_conditions: tuple[str, ...] = ()
    or_where_conditions: tuple[str, ...] = ()
    group_by_clause: str = ""
    order_by_clause: str = ""
    limit_clause: str = ""
    where_parameters: tuple[BindValue, ...] = ()
    or_where_parameters: tuple[BindValue, ...] = ()

    @property
    def parameters(self) -> tuple[BindValue, ...]:
        """All condition parameters in placeholder order (WHERE, then OR-WHERE)."""
        return self.where_parameters + self.or_where_parameters


def empty_state() -> PendingQuery:
    """Return a fresh, empty pending query."""
    return PendingQuery()


def with_table(state: PendingQuery, name: str) -> PendingQuery:
    return replace(state, table=name)


def with_select(state: PendingQuery, columns: tuple[str, ...]) -> PendingQuery:
    return replace(state, select_columns=tuple(columns))


def with_join(state: PendingQuery, table: str, condition: str, join_type: str | None = None) -> PendingQuery:
    clause = f"{join_type} JOIN {table} ON {condition}" if join_type else f"JOIN {table} ON {condition}"
    return replace(state, joins=(*state.joins, clause))


def with_where(state: PendingQuery, column: str, value: Any, operator: str = "=") -> PendingQuery:
    bound = bind_value(value)
    return replace(
        state,
        where_conditions=(*state.where_conditions, f"{column} {operator} ?"),
        where_parameters=(*state.where_parameters, bound),
    )


def with_or_where(state: PendingQuery, column: str, value: Any, operator: str = "=") -> PendingQuery:
    bound = bind_value(value)
    return replace(
        state,
        or_where_conditions=(*state.or_where_conditions, f"{column} {operator} ?"),
        or_where_parameters=(*state.or_where_parameters, bound),
    )


def with_where_in(state: PendingQuery, column: str, values: Any) -> PendingQuery:
    """Add ``column IN (?, ...)``; an empty or non-sequence *values* is a no-op."""
    if not is_value_sequence(values) or not values:
        return state
    bound = bind_values(values)
    placeholders = ", ".join("?" for _ in bound)
    return replace(
        state,
        where_conditions=(*state.where_conditions, f"{column} IN ({placeholders})"),
        where_parameters=(*state.where_parameters, *bound),
    )


def with_raw_where(state: PendingQuery, fragment: str) -> PendingQuery:
    # No parameter: the caller owns injection safety for raw fragments
    return replace(state, where_conditions=(*state.where_conditions, fragment))


def with_group_by(state: PendingQuery, column: str) -> PendingQuery:
    return replace(state, group_by_clause=f"GROUP BY {column}")


def with_order_by(state: PendingQuery, column: str, direction: str) -> PendingQuery:
    return replace(state, order_by_clause=f"ORDER BY {column} {direction}")


def with_limit(state: PendingQuery, count: int) -> PendingQuery:
    return replace(state, limit_clause=f"LIMIT {count}")
