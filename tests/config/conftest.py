"""Fixtures isolating configuration tests from the real project root and environment."""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from pathlib import Path

import pytest

import disconnect.config.config as config_module
import disconnect.config.paths as paths
import disconnect.config.settings as settings


@pytest.fixture
def portable_repo_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point project-root detection at ``tmp_path`` and clear the config override."""

    _ = (tmp_path / "pyproject.toml").write_text("[project]\nname = 'scratch'\n")
    monkeypatch.setattr(paths, "_detect_repo_root", lambda _start=None: tmp_path)
    monkeypatch.delenv(paths.ENV_CONFIG_FILE, raising=False)
    return tmp_path


@pytest.fixture
def config_runtime_env(portable_repo_root: Path) -> Iterator[Path]:
    """Start from an unloaded ``Config`` and put the process-wide one back afterwards."""

    saved = (
        config_module.Config._instance,  # pyright: ignore[reportPrivateUsage]
        config_module.Config._loaded_from,  # pyright: ignore[reportPrivateUsage]
        config_module.config,
    )
    config_module.Config._instance = None  # pyright: ignore[reportPrivateUsage]
    config_module.Config._loaded_from = None  # pyright: ignore[reportPrivateUsage]
    try:
        yield portable_repo_root
    finally:
        (
            config_module.Config._instance,  # pyright: ignore[reportPrivateUsage]
            config_module.Config._loaded_from,  # pyright: ignore[reportPrivateUsage]
            config_module.config,
        ) = saved
        _ = importlib.reload(settings)
