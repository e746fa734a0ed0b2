"""Centralized settings loaded from environment variables.

All configuration is defined once here. Other modules should import
``get_settings()`` rather than calling ``os.getenv()`` directly.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Connection and runtime configuration backed by environment variables.

    Field names are **lowercased** versions of the env-var names.
    ``pydantic-settings`` maps them automatically (case-insensitive).

    Example::

        settings = Settings()  # reads .env + real env
        server = settings.db_server
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- Connection --------------------------------------------------------

    db_driver: str = "MySQL ODBC 8.0 Unicode Driver"
    """ODBC driver name as registered with the driver manager."""

    db_server: str = "localhost"
    """Database server hostname."""

    db_port: int | None = 3306
    """Server port (None → driver default)."""

    db_database: str = ""
    """Default database/schema for the connection."""

    db_user: str | None = None
    """Login user. Ignored when Azure AD authentication is enabled."""

    db_password: str | None = None
    """Login password. Ignored when Azure AD authentication is enabled."""

    db_dsn: str | None = None
    """Full ODBC connection string. Overrides every field above when set."""

    db_autocommit: bool = True
    """Open connections in autocommit mode; transactions are then explicit."""

    db_connect_timeout: int = 10
    """Login timeout in seconds."""

    # -- Azure AD ----------------------------------------------------------

    db_use_azure_ad: bool = False
    """Authenticate with an Azure AD access token instead of user/password."""

    azure_client_id: str | None = None
    """Managed-identity client ID (None → system-assigned / developer login)."""

    # -- SQL dialect hooks -------------------------------------------------

    db_identity_query: str = "SELECT @@IDENTITY"
    """Query returning the last generated key after an INSERT."""

    db_begin_statement: str = "START TRANSACTION"
    """Statement that opens an explicit transaction."""

    # -- Operational -------------------------------------------------------

    log_level: str = "INFO"
    """Root log level used by ``configure_logging()``."""

    log_sql: bool = False
    """Log rendered SQL at INFO instead of DEBUG. Parameter values are never logged."""


def get_settings() -> Settings:
    """Return the process-wide ``Settings`` instance.

    The instance is created on first use so the ``.env`` file is read at
    most once per process.

    Returns:
        The global ``Settings`` object.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


_settings: Settings | None = None
