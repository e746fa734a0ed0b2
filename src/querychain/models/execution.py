"""Execution result returned by a ``SqlExecutor``."""

from typing import Any

from pydantic import BaseModel, Field


class ExecutionResult(BaseModel):
    """Outcome of a single statement.

    SELECT-shaped statements fill ``rows`` and ``columns``; mutations fill
    ``affected_rows`` and, for INSERT, ``insert_id``.
    """

    rows: list[dict[str, Any]] = Field(default_factory=list, description="Result rows keyed by column name")
    columns: list[str] = Field(default_factory=list, description="Column names in result order")
    row_count: int = Field(default=0, description="Number of rows returned")
    affected_rows: int = Field(default=0, description="Rows changed by INSERT/UPDATE/DELETE")
    insert_id: int | None = Field(default=None, description="Generated key of the last inserted row")
