"""Logging facade exports.

Where: platform/logging/__init__.py
What: Re-export the configured logger, setup helper, and custom Rich handler.
Why: Provide a single canonical import path for every module that logs.
"""

from __future__ import annotations

from .config import DEFAULT_LOG_FILE, LOGGER_NAME, logger, setup_logger
from .handlers import GovernorRichHandler

__all__ = [
    "DEFAULT_LOG_FILE",
    "GovernorRichHandler",
    "LOGGER_NAME",
    "logger",
    "setup_logger",
]
