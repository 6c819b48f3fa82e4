"""Where: src/disconnect/config/settings.py
What: Derived runtime settings sourced from persisted configuration.
Why: Expose validated constants to the client and governor without file I/O.
Assumptions: - Config defaults mirror the limits Discogs documents for its API.
Trade-offs: - Validation is limited to simple boundary checks; bad values fall back to defaults.
"""

from __future__ import annotations

from disconnect.config.config import (
    REQUEST_LIMIT_AUTH_DEFAULT,
    REQUEST_LIMIT_DEFAULT,
    REQUEST_LIMIT_INTERVAL_DEFAULT,
    REQUEST_LIMIT_QUEUE_SIZE_DEFAULT,
    config as app_config,
)
from disconnect.platform.discogs.user_agent import DEFAULT_USER_AGENT

# API endpoint ----------------------------------------------------------------

HOST: str = app_config.host or "api.discogs.com"

_port = getattr(app_config, "port", None)
PORT: int = _port if isinstance(_port, int) and 0 < _port < 65536 else 443

API_VERSION: str = app_config.api_version or "v2"

# Response flavour requested through the Accept header.
OUTPUT_FORMATS: tuple[str, ...] = ("discogs", "plaintext", "html")
_output_format = app_config.output_format or "discogs"
OUTPUT_FORMAT: str = _output_format if _output_format in OUTPUT_FORMATS else "discogs"

USER_AGENT: str = app_config.user_agent or DEFAULT_USER_AGENT


# Rate governor ---------------------------------------------------------------


def _positive(value: object, default: int) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) and value > 0 else default


# Anonymous and authenticated quotas per interval.
REQUEST_LIMIT: int = _positive(app_config.request_limit, REQUEST_LIMIT_DEFAULT)
REQUEST_LIMIT_AUTH: int = _positive(app_config.request_limit_auth, REQUEST_LIMIT_AUTH_DEFAULT)

# Interval length in milliseconds.
REQUEST_LIMIT_INTERVAL: int = _positive(
    app_config.request_limit_interval, REQUEST_LIMIT_INTERVAL_DEFAULT
)

_queue_size = app_config.request_limit_queue_size
REQUEST_LIMIT_QUEUE_SIZE: int = (
    _queue_size
    if isinstance(_queue_size, int) and not isinstance(_queue_size, bool) and _queue_size >= 0
    else REQUEST_LIMIT_QUEUE_SIZE_DEFAULT
)

_timeout = app_config.admission_timeout
ADMISSION_TIMEOUT: float | None = (
    float(_timeout)
    if isinstance(_timeout, (int, float)) and not isinstance(_timeout, bool) and _timeout > 0
    else None
)


__all__ = [
    "ADMISSION_TIMEOUT",
    "API_VERSION",
    "HOST",
    "OUTPUT_FORMAT",
    "OUTPUT_FORMATS",
    "PORT",
    "REQUEST_LIMIT",
    "REQUEST_LIMIT_AUTH",
    "REQUEST_LIMIT_INTERVAL",
    "REQUEST_LIMIT_QUEUE_SIZE",
    "USER_AGENT",
]
