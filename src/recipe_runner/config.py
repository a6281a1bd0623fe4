"""Runner settings: defaults, optional YAML file, RUNNER_* environment, CLI overrides."""

from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from recipe_runner.errors import SettingsError

log = logging.getLogger(__name__)

SETTINGS_FILE_NAME = ".runner.yaml"
RECIPE_FILE_NAMES = ("Runfile", "Justfile", "justfile")

DEFAULT_SETTINGS: dict[str, Any] = {
    "recipe_file": None,
    "shell": ["sh", "-cu"],
    "echo": True,
    "log_level": "WARNING",
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _as_bool(value: Any, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() in ("1", "true", "yes", "on"):
            return True
        if value.lower() in ("0", "false", "no", "off"):
            return False
    msg = f"Invalid boolean for {key}: {value!r}"
    raise SettingsError(msg)


def _as_shell(value: Any, *, key: str) -> list[str]:
    if isinstance(value, str):
        value = shlex.split(value)
    if not isinstance(value, list) or not value or not all(isinstance(v, str) for v in value):
        msg = f"Invalid {key}: expected a non-empty list of strings, got {value!r}"
        raise SettingsError(msg)
    return list(value)


def _as_log_level(value: Any, *, key: str) -> str:
    level = str(value).upper()
    if level not in _LOG_LEVELS:
        msg = f"Invalid {key}: {value!r} (expected one of {', '.join(_LOG_LEVELS)})"
        raise SettingsError(msg)
    return level


def resolve_settings(overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return settings with defaults filled; unknown keys are dropped, None values ignored."""
    out = dict(DEFAULT_SETTINGS)
    if overrides:
        out.update({k: v for k, v in overrides.items() if k in out and v is not None})
    if out["recipe_file"] is not None:
        out["recipe_file"] = str(out["recipe_file"])
    out["shell"] = _as_shell(out["shell"], key="shell")
    out["echo"] = _as_bool(out["echo"], key="echo")
    out["log_level"] = _as_log_level(out["log_level"], key="log_level")
    return out


def load_settings_file(path: Path) -> dict[str, Any]:
    """Read a YAML settings file. Empty file -> {}. Raises SettingsError on bad YAML."""
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Could not parse settings file {path}: {e}"
        raise SettingsError(msg) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Settings file {path} must contain a mapping"
        raise SettingsError(msg)
    unknown = sorted(set(data) - set(DEFAULT_SETTINGS))
    if unknown:
        log.warning("Ignoring unknown settings in %s: %s", path, ", ".join(unknown))
    return data


def settings_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """RUNNER_FILE, RUNNER_SHELL, RUNNER_ECHO, RUNNER_LOG_LEVEL."""
    env = os.environ if environ is None else environ
    out: dict[str, Any] = {}
    for key in DEFAULT_SETTINGS:
        env_key = "RUNNER_FILE" if key == "recipe_file" else f"RUNNER_{key.upper()}"
        if env.get(env_key):
            out[key] = env[env_key]
    return out


def load_settings(
    project_root: Path,
    config_path: Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Layer defaults < settings file < environment < CLI flags."""
    merged: dict[str, Any] = {}
    path = config_path if config_path is not None else project_root / SETTINGS_FILE_NAME
    if config_path is not None and not path.is_file():
        msg = f"Settings file not found: {path}"
        raise SettingsError(msg)
    if path.is_file():
        log.debug("Reading settings from %s", path)
        merged.update(load_settings_file(path))
    merged.update(settings_from_env(environ))
    if cli_overrides:
        merged.update({k: v for k, v in cli_overrides.items() if v is not None})
    return resolve_settings(merged)
