"""Shared database clients."""

from .sql_client import AsyncSqlClient

__all__ = ["AsyncSqlClient"]
