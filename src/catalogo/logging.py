"""Logging setup for Catalogo.

Every module logs through ``logging.getLogger(__name__)`` under the
``catalogo`` root; setup_logging attaches the handlers once, at startup.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from catalogo.config import Settings

LOGGER_NAME = "catalogo"
LOG_FILE = "catalogo.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_BYTES = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5


def setup_logging(
    settings: Settings | None = None,
    *,
    console: bool = True,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
    echo_sql: bool = False,
) -> logging.Logger:
    """Configure the catalogo logger from settings.

    Calling it again replaces the previous handlers.

    Args:
        settings: Source of log_dir and log_level. Defaults to Settings.from_env().
        console: Also log to stderr.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.
        echo_sql: Route SQLAlchemy engine statements into the same handlers.

    Returns:
        The catalogo root logger.
    """
    if settings is None:
        settings = Settings.from_env()

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_dir / LOG_FILE,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logger = logging.getLogger(LOGGER_NAME)
    _replace_handlers(logger, handlers)
    logger.setLevel(level)

    sql_logger = logging.getLogger("sqlalchemy.engine")
    if echo_sql:
        _replace_handlers(sql_logger, handlers)
        sql_logger.setLevel(logging.INFO)
    else:
        _replace_handlers(sql_logger, [])
        sql_logger.setLevel(logging.WARNING)

    logger.info(
        "Logging to %s at %s (db=%s, cache=%s)",
        log_dir / LOG_FILE,
        logging.getLevelName(level),
        settings.db_path,
        "on" if settings.cache_enabled else "off",
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a component logger under the catalogo root, e.g. 'cache'."""
    if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def _replace_handlers(logger: logging.Logger, handlers: list[logging.Handler]) -> None:
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)
