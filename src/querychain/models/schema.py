"""
Declarative table schema models.

A table schema maps column names to ``ColumnDefinition`` objects; plain
dicts with the same keys (snake_case or camelCase) are validated into them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ColumnDefinition(BaseModel):
    """A single column in a ``CREATE TABLE`` statement."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str = Field(description="SQL type keyword, e.g. 'INT', 'VARCHAR', 'DATETIME'")
    length: int | str | None = Field(
        default=None, description="Type length or precision, rendered as TYPE(length)"
    )
    not_null: bool = Field(default=False)
    auto_increment: bool = Field(default=False)
    primary_key: bool = Field(default=False)
    unique: bool = Field(default=False)
    default: Any = Field(
        default=None,
        description="Default expression rendered verbatim (e.g. 'CURRENT_TIMESTAMP'); an explicit None renders NULL",
    )
