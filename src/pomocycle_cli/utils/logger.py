"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir
from rich.logging import RichHandler

from pomocycle_cli.utils.ui.console import get_error_console

_APP_NAME = "pomocycle_cli"
_LOG_FILE = "pomocycle.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Return the singleton application logger, initialising it on first call.

    Module loggers (``logging.getLogger(__name__)``) inside the package are
    children of this one and share its handlers.
    """
    global _logger
    if _logger is not None:
        return _logger

    log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(logging.DEBUG)
    if not logger.handlers:
        logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return _logger


def set_level(level: int | str) -> None:
    """Change the threshold of the application logger."""
    get_logger().setLevel(level)


def enable_console_logging(level: int | str = logging.DEBUG) -> logging.Handler:
    """Mirror log records to stderr through Rich."""
    logger = get_logger()
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            return handler

    handler = RichHandler(
        console=get_error_console(),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    return handler


def disable_file_logging() -> None:
    """Detach and close the rotating log file handler."""
    logger = get_logger()
    for handler in list(logger.handlers):
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            logger.removeHandler(handler)
            handler.close()
    if not logger.handlers:
        # keeps records away from logging.lastResort
        logger.addHandler(logging.NullHandler())
