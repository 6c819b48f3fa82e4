"""Configuration management for the Discogs client."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, ClassVar

from disconnect.config.paths import default_config_path
from disconnect.platform.logging import logger

REQUEST_LIMIT_DEFAULT: int = 25
REQUEST_LIMIT_AUTH_DEFAULT: int = 60
REQUEST_LIMIT_INTERVAL_DEFAULT: int = 60_000
REQUEST_LIMIT_QUEUE_SIZE_DEFAULT: int = 20


@dataclass
class Config:
    """Client configuration persisted as TOML."""

    # Identity sent with every request; None means the built-in user agent
    user_agent: str | None = None

    # API endpoint
    host: str | None = None
    port: int | None = None
    api_version: str | None = None
    output_format: str | None = None

    # Client-side rate governor (calls per interval, interval in ms, buffer size)
    request_limit: int = REQUEST_LIMIT_DEFAULT
    request_limit_auth: int = REQUEST_LIMIT_AUTH_DEFAULT
    request_limit_interval: int = REQUEST_LIMIT_INTERVAL_DEFAULT
    request_limit_queue_size: int = REQUEST_LIMIT_QUEUE_SIZE_DEFAULT

    # Seconds a caller waits for a buffered request slot; None waits indefinitely
    admission_timeout: float | None = None

    # Process-wide instance and the file it came from
    _instance: ClassVar["Config | None"] = None
    _loaded_from: ClassVar[Path | None] = None

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> "Config":
        """Build a config from parsed TOML, dropping keys this version does not know."""

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
        return cls(**{key: value for key, value in values.items() if key in known})

    @classmethod
    def _read(cls, path: Path) -> "Config":
        if not path.is_file():
            logger.debug("No configuration at %s, using defaults", path)
            return cls()
        try:
            parsed = tomllib.loads(path.read_text(encoding="utf-8"))
            loaded = cls.from_mapping(parsed)
        except (OSError, tomllib.TOMLDecodeError, TypeError) as exc:
            logger.error("Cannot read configuration %s: %s", path, exc)
            raise
        logger.info("Read configuration from %s", path)
        return loaded

    @classmethod
    def load(cls) -> "Config":
        """Return the process-wide configuration, reading it on first use.

        Returns:
            Config: Values from the TOML file, or defaults when there is none.
        """
        if cls._instance is None:
            source = default_config_path()
            cls._instance = cls._read(source)
            cls._loaded_from = source
        return cls._instance


# Process-wide configuration
config = Config.load()
