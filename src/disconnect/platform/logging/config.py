"""Where: platform/logging/config.py
What: Build the ``disconnect`` logger with a Rich console handler and an optional rotating file.
Why: Importing the library must not print below WARNING or write files unless asked to.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final

from rich.console import Console

from disconnect.config.paths import configured_log_file, default_log_file

from .handlers import GovernorRichHandler

LOGGER_NAME: Final[str] = "disconnect"
DEFAULT_LOG_FILE: Final[Path] = default_log_file()

_FILE_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3


def _file_handler(path: Path, level: int) -> RotatingFileHandler:
    target = path.expanduser().resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        target, maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def setup_logger(
    log_file: Path | None = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """(Re)configure the library logger, replacing any handlers installed earlier.

    Args:
        log_file: Rotating log destination; console only when None.
        console_level: Threshold for the Rich console on stderr.
        file_level: Threshold for the log file.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    while logger.handlers:
        stale = logger.handlers.pop()
        stale.close()

    console_handler = GovernorRichHandler(console=Console(stderr=True, soft_wrap=True))
    console_handler.setLevel(console_level)
    logger.addHandler(console_handler)

    if log_file is not None:
        logger.addHandler(_file_handler(Path(log_file), file_level))
    return logger


logger: Final[logging.Logger] = setup_logger(log_file=configured_log_file())


__all__ = ["DEFAULT_LOG_FILE", "LOGGER_NAME", "logger", "setup_logger"]
