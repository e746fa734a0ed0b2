"""Unit tests for PendingQuery and its pure transitions.

Tests cover:
- Frozen value semantics and the empty state
- Overwriting vs. appending transitions
- where_in no-op rules
- Parameter ordering across WHERE and OR-WHERE groups
"""

from collections import deque
from dataclasses import FrozenInstanceError
from datetime import date

import pytest
from querychain.entities.shared.errors import InvalidArgumentError
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


class TestPendingQueryValue:
    """PendingQuery is an immutable value with empty defaults."""

    def test_frozen(self) -> None:
        state = empty_state()
        with pytest.raises(FrozenInstanceError):
            state.table = "users"  # type: ignore[misc]

    def test_empty_state_defaults(self) -> None:
        state = empty_state()
        assert state.table == ""
        assert state.joins == ()
        assert state.select_columns == ()
        assert state.where_conditions == ()
        assert state.or_where_conditions == ()
        assert state.group_by_clause == ""
        assert state.order_by_clause == ""
        assert state.limit_clause == ""
        assert state.parameters == ()

    def test_empty_states_are_equal(self) -> None:
        assert empty_state() == empty_state()
        assert empty_state() == PendingQuery()

    def test_transition_does_not_mutate_input(self) -> None:
        before = empty_state()
        after = with_where(with_table(before, "users"), "id", 1)
        assert before == empty_state()
        assert after.table == "users"


class TestOverwritingTransitions:
    """select, group_by, order_by and limit are last-write-wins."""

    def test_select_replaces(self) -> None:
        state = with_select(with_select(empty_state(), ("a",)), ("b",))
        assert state.select_columns == ("b",)

    def test_group_by_replaces(self) -> None:
        state = with_group_by(with_group_by(empty_state(), "a"), "b")
        assert state.group_by_clause == "GROUP BY b"

    def test_order_by_renders_direction_literally(self) -> None:
        state = with_order_by(empty_state(), "created_at", "SIDEWAYS")
        assert state.order_by_clause == "ORDER BY created_at SIDEWAYS"

    def test_limit_replaces(self) -> None:
        state = with_limit(with_limit(empty_state(), 10), 1)
        assert state.limit_clause == "LIMIT 1"


class TestAppendingTransitions:
    """joins and conditions accumulate in call order."""

    def test_plain_join(self) -> None:
        state = with_join(empty_state(), "orders", "orders.user_id = users.id")
        assert state.joins == ("JOIN orders ON orders.user_id = users.id",)

    def test_typed_joins_keep_order(self) -> None:
        state = with_join(empty_state(), "a", "a.id = t.a_id", "LEFT")
        state = with_join(state, "b", "b.id = t.b_id", "RIGHT")
        assert state.joins == (
            "LEFT JOIN a ON a.id = t.a_id",
            "RIGHT JOIN b ON b.id = t.b_id",
        )

    def test_where_default_operator(self) -> None:
        state = with_where(empty_state(), "status", "active")
        assert state.where_conditions == ("status = ?",)
        assert state.parameters == ("active",)

    def test_where_custom_operator(self) -> None:
        state = with_where(empty_state(), "age", 18, ">")
        assert state.where_conditions == ("age > ?",)
        assert state.parameters == (18,)

    def test_or_where_targets_or_group(self) -> None:
        state = with_or_where(empty_state(), "role", "admin")
        assert state.where_conditions == ()
        assert state.or_where_conditions == ("role = ?",)
        assert state.parameters == ("admin",)

    def test_raw_where_binds_nothing(self) -> None:
        state = with_raw_where(empty_state(), "deleted_at IS NULL")
        assert state.where_conditions == ("deleted_at IS NULL",)
        assert state.parameters == ()

    def test_unbindable_value_leaves_state_unchanged(self) -> None:
        state = with_table(empty_state(), "users")
        with pytest.raises(InvalidArgumentError):
            with_where(state, "meta", {"nested": True})
        assert state == with_table(empty_state(), "users")


class TestWhereIn:
    """where_in placeholders and no-op rules."""

    def test_three_values(self) -> None:
        state = with_where_in(empty_state(), "id", [1, 2, 3])
        assert state.where_conditions == ("id IN (?, ?, ?)",)
        assert state.parameters == (1, 2, 3)

    def test_tuple_accepted(self) -> None:
        state = with_where_in(empty_state(), "code", ("a", "b"))
        assert state.where_conditions == ("code IN (?, ?)",)

    @pytest.mark.parametrize("values", [range(1, 4), deque([1, 2, 3])])
    def test_other_sequences_accepted(self, values: object) -> None:
        state = with_where_in(empty_state(), "id", values)
        assert state.where_conditions == ("id IN (?, ?, ?)",)
        assert state.parameters == (1, 2, 3)

    @pytest.mark.parametrize("values", [[], (), range(0), deque(), "abc", b"ab", None, 5, {"a": 1}, {1, 2}])
    def test_empty_or_non_sequence_is_noop(self, values: object) -> None:
        state = with_where(empty_state(), "x", 1)
        assert with_where_in(state, "id", values) is state

    def test_bad_element_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            with_where_in(empty_state(), "id", [1, object()])


class TestParameterOrder:
    """Parameters line up with placeholders: WHERE group first, then OR group."""

    def test_mixed_where_and_where_in(self) -> None:
        state = with_where(empty_state(), "a", 1)
        state = with_where_in(state, "b", [2, 3])
        state = with_where(state, "c", date(2024, 1, 1))
        assert state.parameters == (1, 2, 3, date(2024, 1, 1))

    def test_or_where_before_where_still_renders_where_first(self) -> None:
        state = with_or_where(empty_state(), "role", "admin")
        state = with_where(state, "status", "active")
        assert state.where_parameters == ("active",)
        assert state.or_where_parameters == ("admin",)
        assert state.parameters == ("active", "admin")
