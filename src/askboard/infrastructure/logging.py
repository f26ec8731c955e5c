"""Process logging setup for askboard.

Application modules log `key=value` event lines through module loggers. The
database drivers are capped at WARNING because their INFO/DEBUG output echoes
bound statement parameters, and those include the credential columns.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
CREDENTIAL_SENSITIVE_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg")


def resolve_log_level(level: str) -> int:
    """Map a level name such as `debug` to its numeric value; unknown names mean INFO."""

    name = level.strip().upper()
    resolved = logging.getLevelName(name) if name else logging.INFO
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str) -> int:
    """Install the root handler and cap driver loggers; return the applied level."""

    resolved_level = resolve_log_level(level)
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT)

    driver_level = max(resolved_level, logging.WARNING)
    for name in CREDENTIAL_SENSITIVE_LOGGERS:
        logging.getLogger(name).setLevel(driver_level)
    return resolved_level
