"""
querychain: a fluent, parameterized SQL query builder over async ODBC.

Builder calls accumulate a pending statement; ``get``, ``first``,
``insert``, ``update`` and ``delete`` render it to ``?``-placeholder SQL
and run it through a ``SqlExecutor``.
"""

from querychain.config import Settings, get_settings
from querychain.entities.query_builder import QueryBuilder
from querychain.entities.shared.errors import (
    ConnectionNotEstablishedError,
    ExecutionFailedError,
    InvalidArgumentError,
    QueryChainError,
)
from querychain.entities.shared.protocols import SqlExecutor
from querychain.entities.shared.state import PendingQuery, empty_state
from querychain.logging_config import configure_logging
from querychain.models import ColumnDefinition, ExecutionResult

__all__ = [
    "QueryBuilder",
    "SqlExecutor",
    "PendingQuery",
    "empty_state",
    "ExecutionResult",
    "ColumnDefinition",
    "Settings",
    "get_settings",
    "configure_logging",
    "QueryChainError",
    "ConnectionNotEstablishedError",
    "ExecutionFailedError",
    "InvalidArgumentError",
]
