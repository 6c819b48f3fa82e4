"""Tests for config and log path resolution."""

from __future__ import annotations

from pathlib import Path

from disconnect.config.paths import (
    configured_log_file,
    default_config_path,
    default_log_file,
    resolve_overridable_path,
)


def test_default_config_path_uses_repo_root(portable_repo_root: Path) -> None:
    assert default_config_path(env={}) == (portable_repo_root / "config" / "config.toml").resolve()


def test_default_config_path_env_override(portable_repo_root: Path, tmp_path: Path) -> None:
    _ = portable_repo_root
    target = tmp_path / "custom" / "disconnect.toml"

    assert default_config_path(env={"DISCONNECT_CONFIG": str(target)}) == target.resolve()


def test_blank_env_value_is_ignored(portable_repo_root: Path) -> None:
    assert default_config_path(env={"DISCONNECT_CONFIG": "   "}) == (
        portable_repo_root / "config" / "config.toml"
    ).resolve()


def test_explicit_path_wins(tmp_path: Path) -> None:
    explicit = tmp_path / "explicit.toml"

    resolved = resolve_overridable_path(
        explicit_path=explicit,
        env={"X": str(tmp_path / "env.toml")},
        env_var="X",
        default_factory=lambda: tmp_path / "default.toml",
    )

    assert resolved == explicit.resolve()


def test_log_file_paths(portable_repo_root: Path, tmp_path: Path) -> None:
    assert default_log_file() == (portable_repo_root / "logs" / "disconnect.log").resolve()
    assert configured_log_file(env={}) is None
    log_path = tmp_path / "d.log"
    assert configured_log_file(env={"DISCONNECT_LOG_FILE": str(log_path)}) == log_path.resolve()
