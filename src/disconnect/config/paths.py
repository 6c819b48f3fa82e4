"""Where: src/disconnect/config/paths.py
What: Locate the TOML config file and the optional log file.
Why: Keep file discovery independent of the config loader so logging can use it first.

Lookup order for the config file: ``DISCONNECT_CONFIG``, then
``<project_root>/config/config.toml``. The log file exists only when
``DISCONNECT_LOG_FILE`` names one; ``<project_root>/logs/disconnect.log`` is
the suggested location.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Final

ENV_CONFIG_FILE: Final[str] = "DISCONNECT_CONFIG"
ENV_LOG_FILE: Final[str] = "DISCONNECT_LOG_FILE"

_ROOT_MARKERS: Final[tuple[str, ...]] = ("pyproject.toml", ".git")


def _env_path(env: Mapping[str, str] | None, name: str) -> Path | None:
    raw = (os.environ if env is None else env).get(name, "").strip()
    return Path(raw).expanduser().resolve() if raw else None


def resolve_overridable_path(
    *,
    explicit_path: Path | str | None,
    env: Mapping[str, str] | None,
    env_var: str | None,
    default_factory: Callable[[], Path],
) -> Path:
    """Pick the explicit path, else the environment override, else the default."""

    if explicit_path is not None:
        return Path(explicit_path).expanduser().resolve()
    from_env = _env_path(env, env_var) if env_var else None
    return from_env or default_factory().expanduser().resolve()


def _detect_repo_root(start: Path | None = None) -> Path:
    """Return the nearest ancestor holding a project marker, or the working directory."""

    origin = (start or Path(__file__).resolve()).parent
    return next(
        (
            candidate
            for candidate in (origin, *origin.parents)
            if any((candidate / marker).exists() for marker in _ROOT_MARKERS)
        ),
        Path.cwd(),
    )


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    return resolve_overridable_path(
        explicit_path=None,
        env=env,
        env_var=ENV_CONFIG_FILE,
        default_factory=lambda: _detect_repo_root() / "config" / "config.toml",
    )


def default_log_file() -> Path:
    return (_detect_repo_root() / "logs" / "disconnect.log").resolve()


def configured_log_file(env: Mapping[str, str] | None = None) -> Path | None:
    """Return the log file requested through ``DISCONNECT_LOG_FILE``, if any."""

    return _env_path(env, ENV_LOG_FILE)


__all__ = [
    "ENV_CONFIG_FILE",
    "ENV_LOG_FILE",
    "configured_log_file",
    "default_config_path",
    "default_log_file",
    "resolve_overridable_path",
]
