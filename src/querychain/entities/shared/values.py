"""Bindable parameter values.

Only a closed set of scalar types is ever handed to the driver. Anything
outside that set is rejected at the builder call that tried to bind it, so
the pending statement is never left holding an opaque structure.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, TypeAlias

from querychain.entities.shared.errors import InvalidArgumentError

BindValue: TypeAlias = str | int | float | Decimal | bool | date | time | datetime | bytes | None

# datetime is a subclass of date, bool of int
_SCALAR_TYPES: tuple[type, ...] = (str, int, float, Decimal, date, time, bytes)


def bind_value(value: Any) -> BindValue:
    """Return *value* in a form the driver can bind.

    Args:
        value: Candidate parameter value.

    Returns:
        The value itself, or ``bytes`` for ``bytearray`` / ``memoryview``.

    Raises:
        InvalidArgumentError: If the value is not a supported scalar.
    """
    if value is None or isinstance(value, _SCALAR_TYPES):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise InvalidArgumentError(
        f"Unsupported parameter value of type {type(value).__name__}: "
        "expected str, int, float, Decimal, bool, date, time, datetime, bytes or None"
    )


def bind_values(values: Iterable[Any]) -> tuple[BindValue, ...]:
    """Bind every element of *values*, preserving order."""
    return tuple(bind_value(v) for v in values)


def is_value_sequence(values: Any) -> bool:
    """True if *values* is an ordered sequence usable for ``IN (...)``.

    Any ``collections.abc.Sequence`` qualifies (list, tuple, range, deque).
    Strings and byte strings are sequences in Python but are single
    values here, so they do not.
    """
    return isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray, memoryview))
