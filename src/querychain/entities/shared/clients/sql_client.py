"""
Async ODBC client implementing the ``SqlExecutor`` protocol.

Executes parameterized statements through ``aioodbc``. Authentication is
either user/password from settings or an Azure AD access token.
"""

import logging
import struct
from typing import Any

import aioodbc
import pyodbc
from azure.identity import DefaultAzureCredential

from querychain.config import Settings, get_settings
from querychain.entities.shared.errors import ConnectionNotEstablishedError, ExecutionFailedError
from querychain.models import ExecutionResult

logger = logging.getLogger(__name__)

# SQL_COPT_SS_ACCESS_TOKEN
_ACCESS_TOKEN_ATTR = 1256
_TOKEN_SCOPE = "https://database.windows.net/.default"


def get_azure_sql_token(client_id: str | None = None) -> bytes:
    """
    Get an Azure AD token for database authentication.

    Args:
        client_id: User-assigned managed identity client ID, if any.

    Returns:
        Token bytes formatted for the ODBC driver
    """
    # When running locally, DefaultAzureCredential will use CLI/VS Code credentials
    logger.info("Getting SQL token, client_id=%s", client_id)

    if client_id:
        credential = DefaultAzureCredential(managed_identity_client_id=client_id)
    else:
        credential = DefaultAzureCredential()

    token = credential.get_token(_TOKEN_SCOPE)
    logger.info("Token acquired, expires_on=%s", token.expires_on)

    token_bytes = token.token.encode("utf-16-le")
    return struct.pack(f"<I{len(token_bytes)}s", len(token_bytes), token_bytes)


def build_connection_string(settings: Settings) -> str:
    """Build an ODBC connection string from settings.

    ``db_dsn`` wins when set. Credentials are omitted under Azure AD
    authentication because the token is passed as a connection attribute.
    """
    if settings.db_dsn:
        return settings.db_dsn

    parts = [
        f"DRIVER={{{settings.db_driver}}}",
        f"SERVER={settings.db_server}",
    ]
    if settings.db_port:
        parts.append(f"PORT={settings.db_port}")
    if settings.db_database:
        parts.append(f"DATABASE={settings.db_database}")
    if not settings.db_use_azure_ad:
        if settings.db_user:
            parts.append(f"UID={settings.db_user}")
        if settings.db_password:
            parts.append(f"PWD={settings.db_password}")
    return ";".join(parts) + ";"


def _sql_state(error: Exception) -> str | None:
    """Extract the SQL state code pyodbc puts in ``args[0]``."""
    if error.args and isinstance(error.args[0], str):
        return error.args[0]
    return None


class AsyncSqlClient:
    """
    Async ODBC connection satisfying ``SqlExecutor``.

    Usage:
        async with AsyncSqlClient() as client:
            result = await client.execute("SELECT * FROM users WHERE id = ?", [1])
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the SQL client.

        Args:
            settings: Connection settings. Defaults to ``get_settings()``.
        """
        self.settings = settings or get_settings()
        self._connection: aioodbc.Connection | None = None

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def connect(self) -> None:
        """Open the database connection. Calling it twice is a no-op."""
        if self._connection is not None:
            return

        connect_kwargs: dict[str, Any] = {
            "dsn": build_connection_string(self.settings),
            "autocommit": self.settings.db_autocommit,
            "timeout": self.settings.db_connect_timeout,
        }
        if self.settings.db_use_azure_ad:
            token_struct = get_azure_sql_token(self.settings.azure_client_id)
            connect_kwargs["attrs_before"] = {_ACCESS_TOKEN_ATTR: token_struct}

        logger.info(
            "Connecting to %s/%s via %s",
            self.settings.db_server,
            self.settings.db_database,
            self.settings.db_driver,
        )
        try:
            self._connection = await aioodbc.connect(**connect_kwargs)
        except pyodbc.Error as e:
            logger.error("Database connection failed: %s", e)
            raise ExecutionFailedError(
                f"Failed to connect: {e}", code=_sql_state(e), original_error=e
            ) from e

    async def close(self) -> None:
        """Close the database connection. Safe to call when not connected."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def __aenter__(self):
        """Establish the database connection."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close the database connection."""
        await self.close()

    def _require_connection(self) -> aioodbc.Connection:
        if self._connection is None:
            raise ConnectionNotEstablishedError()
        return self._connection

    async def execute(self, query: str, params: list[Any] | None = None) -> ExecutionResult:
        """
        Execute a parameterized statement and return its result.

        Args:
            query: SQL with ``?`` placeholders
            params: Values in placeholder order

        Returns:
            ``ExecutionResult`` with rows for SELECT-shaped statements, or
            affected rows (and the generated key for INSERT) for mutations.

        Raises:
            ConnectionNotEstablishedError: If ``connect()`` was not called.
            ExecutionFailedError: If the driver rejects the statement.
        """
        connection = self._require_connection()
        params = params or []

        try:
            async with connection.cursor() as cursor:
                await cursor.execute(query, *params)

                if cursor.description:
                    columns = [column[0] for column in cursor.description]
                    raw_rows = await cursor.fetchall()
                    rows = [dict(zip(columns, row)) for row in raw_rows]
                    logger.debug("Statement returned %d rows", len(rows))
                    return ExecutionResult(rows=rows, columns=columns, row_count=len(rows))

                affected = cursor.rowcount if cursor.rowcount >= 0 else 0
                insert_id = None
                if query.lstrip().upper().startswith("INSERT"):
                    insert_id = await self._last_insert_id(cursor)
                logger.debug("Statement affected %d rows", affected)
                return ExecutionResult(affected_rows=affected, insert_id=insert_id)

        except pyodbc.Error as e:
            raise ExecutionFailedError(
                f"Statement failed: {e}", sql=query, code=_sql_state(e), original_error=e
            ) from e

    async def _last_insert_id(self, cursor) -> int | None:
        await cursor.execute(self.settings.db_identity_query)
        row = await cursor.fetchone()
        if row is None or row[0] is None:
            return None
        return int(row[0])

    async def _run(self, statement: str) -> None:
        connection = self._require_connection()
        try:
            async with connection.cursor() as cursor:
                await cursor.execute(statement)
        except pyodbc.Error as e:
            raise ExecutionFailedError(
                f"{statement} failed: {e}", sql=statement, code=_sql_state(e), original_error=e
            ) from e

    async def begin_transaction(self) -> None:
        await self._run(self.settings.db_begin_statement)

    async def commit(self) -> None:
        await self._run("COMMIT")

    async def rollback(self) -> None:
        await self._run("ROLLBACK")
