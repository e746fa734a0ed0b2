"""Logging setup for applications embedding querychain.

Library modules only create loggers; nothing is configured on import.
"""

import logging

from querychain.config import get_settings


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging once for the process.

    Args:
        level: Log level name or number. Defaults to ``Settings.log_level``.
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = level.upper()

    # force=True prevents duplicate handlers on repeated calls
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )

    # Reduce noise from the Azure SDK token refresh logging
    logging.getLogger("azure").setLevel(logging.WARNING)
