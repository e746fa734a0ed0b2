"""Protocol interfaces for I/O boundaries.

These protocols enable dependency injection for testability.
The production implementation wraps an ``aioodbc`` connection; test fakes
return canned data with zero network access.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from querychain.models import ExecutionResult


@runtime_checkable
class SqlExecutor(Protocol):
    """Executes parameterised SQL against the database.

    Failures are raised, never returned: implementations raise
    ``ExecutionFailedError`` (or let the driver error propagate).
    """

    async def execute(
        self,
        query: str,
        params: list[Any] | None = None,
    ) -> ExecutionResult:
        """Execute a SQL statement.

        Args:
            query: SQL statement with ``?`` placeholders.
            params: Bind-parameter values in placeholder order (or ``None``).

        Returns:
            Rows for SELECT-shaped statements; affected rows and the
            generated key for mutations.
        """
        ...

    async def begin_transaction(self) -> None:
        """Start a transaction on the underlying connection."""
        ...

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        ...
