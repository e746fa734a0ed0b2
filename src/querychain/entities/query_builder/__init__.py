"""Fluent query builder."""

from .builder import QueryBuilder

__all__ = ["QueryBuilder"]
