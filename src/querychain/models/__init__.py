"""
Shared models for querychain.

All models are re-exported here.
"""

from .execution import ExecutionResult
from .schema import ColumnDefinition

__all__ = [
    # Execution (executor results)
    "ExecutionResult",
    # Schema (CREATE TABLE definitions)
    "ColumnDefinition",
]
