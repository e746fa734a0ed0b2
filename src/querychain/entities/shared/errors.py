"""Error kinds raised by the query builder and the SQL client."""

from __future__ import annotations


class QueryChainError(Exception):
    """Base exception for querychain errors."""


class ConnectionNotEstablishedError(QueryChainError):
    """A statement was issued before ``connect()`` (or after ``disconnect()``)."""

    def __init__(self, message: str = "Database connection is not established. Call connect() first.") -> None:
        super().__init__(message)


class ExecutionFailedError(QueryChainError):
    """The database rejected a rendered statement.

    Attributes:
        sql: The statement text that was sent (placeholders, not values).
        code: SQL state or vendor error code reported by the driver, if any.
        original_error: The driver exception, unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        sql: str = "",
        code: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.sql = sql
        self.code = code
        self.original_error = original_error


class InvalidArgumentError(QueryChainError, ValueError):
    """A builder call received a value it cannot render or bind."""
