"""Shared test fixtures for querychain."""

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure src/ is on the path for imports when the package is not installed
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from querychain.config import Settings
from querychain.entities.query_builder import QueryBuilder
from querychain.models import ExecutionResult

# ---------------------------------------------------------------------------
# Protocol fakes
# ---------------------------------------------------------------------------


class FakeSqlExecutor:
    """In-memory fake satisfying the ``SqlExecutor`` protocol.

    Returns a canned ``ExecutionResult`` or raises a canned error, and
    records every call for assertions.
    """

    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        *,
        affected_rows: int = 0,
        insert_id: int | None = None,
        error: Exception | None = None,
    ) -> None:
        self.rows: list[dict[str, Any]] = rows or []
        self.affected_rows = affected_rows
        self.insert_id = insert_id
        self.error = error
        self.calls: list[tuple[str, list[Any] | None]] = []
        self.events: list[str] = []

    @property
    def last_call(self) -> tuple[str, list[Any] | None]:
        return self.calls[-1]

    async def execute(
        self,
        query: str,
        params: list[Any] | None = None,
    ) -> ExecutionResult:
        """Record the call and return (or raise) the canned outcome."""
        self.calls.append((query, params))

        if self.error is not None:
            raise self.error

        if query.startswith("SELECT"):
            return ExecutionResult(
                rows=self.rows,
                columns=list(self.rows[0]) if self.rows else [],
                row_count=len(self.rows),
            )
        return ExecutionResult(affected_rows=self.affected_rows, insert_id=self.insert_id)

    async def begin_transaction(self) -> None:
        self.events.append("begin")

    async def commit(self) -> None:
        self.events.append("commit")

    async def rollback(self) -> None:
        self.events.append("rollback")


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    """Return a ``Settings`` instance populated with safe test defaults."""
    return Settings(
        _env_file=None,
        db_driver="Test ODBC Driver",
        db_server="test-server",
        db_port=3306,
        db_database="TestDB",
        db_user="tester",
        db_password="secret",
    )


@pytest.fixture
def fake_sql_executor() -> FakeSqlExecutor:
    """Return an empty ``FakeSqlExecutor`` instance."""
    return FakeSqlExecutor()


@pytest.fixture
def builder(fake_sql_executor: FakeSqlExecutor, test_settings: Settings) -> QueryBuilder:
    """Return a ``QueryBuilder`` wired to ``fake_sql_executor``."""
    return QueryBuilder(fake_sql_executor, settings=test_settings)
