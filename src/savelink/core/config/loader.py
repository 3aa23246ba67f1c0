"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < root config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import LauncherConfig

logger = logging.getLogger(__name__)

ROOT_CONFIG_NAME = "savelink.json"


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """Path to ~/.config/savelink/config.json (or XDG equivalent)."""
    return get_xdg_config_home() / "savelink" / "config.json"


def get_root_config_path(root: Path) -> Path:
    """Path to the per-root configuration file."""
    return root / ROOT_CONFIG_NAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`; nested dicts
    are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 2}})
        {'a': 1, 'b': {'x': 10, 'y': 2}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None

    if isinstance(data, dict):
        return data
    logger.warning("Ignoring config at %s: top level is not an object", path)
    return None


def _set(result: dict[str, Any], section: str, key: str, value: Any) -> None:
    result.setdefault(section, {})[key] = value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        SAVELINK_REMOTE_URL - overrides sync.remote_url
        SAVELINK_BRANCH - overrides sync.branch
        SAVELINK_OFFLINE - overrides sync.offline
        SAVELINK_TARGETS_URL - overrides setup.targets_url
        SAVELINK_SETTLE_DELAY - overrides launch.settle_delay_seconds
    """
    result = deep_merge({}, config_dict)

    if remote_url := os.environ.get("SAVELINK_REMOTE_URL"):
        _set(result, "sync", "remote_url", remote_url)

    if branch := os.environ.get("SAVELINK_BRANCH"):
        _set(result, "sync", "branch", branch)

    if offline_str := os.environ.get("SAVELINK_OFFLINE"):
        _set(result, "sync", "offline", offline_str.lower() not in ("false", "0", ""))

    if targets_url := os.environ.get("SAVELINK_TARGETS_URL"):
        _set(result, "setup", "targets_url", targets_url)

    if delay_str := os.environ.get("SAVELINK_SETTLE_DELAY"):
        try:
            delay = float(delay_str)
            if delay < 0:
                logger.warning("SAVELINK_SETTLE_DELAY must be >= 0, got %s, ignoring", delay)
            else:
                _set(result, "launch", "settle_delay_seconds", delay)
        except ValueError:
            logger.warning("Invalid SAVELINK_SETTLE_DELAY value '%s', ignoring", delay_str)

    return result


def load_config(root: Path, user_config: Path | None = None) -> LauncherConfig:
    """
    Load configuration for a launcher root.

    Args:
        root: Launcher root directory
        user_config: Override for the user config path (tests)

    Returns:
        Validated LauncherConfig
    """
    merged: dict[str, Any] = {}

    for path in (user_config or get_user_config_path(), get_root_config_path(root)):
        data = load_json_file(path)
        if data is None:
            continue
        try:
            # Validate each layer on its own so one bad file doesn't poison the rest
            LauncherConfig.model_validate(deep_merge(merged, data))
        except ValidationError as e:
            logger.warning("Ignoring invalid config at %s: %s", path, e)
            continue
        merged = deep_merge(merged, data)

    with_env = apply_env_overrides(merged)
    try:
        return LauncherConfig.model_validate(with_env)
    except ValidationError as e:
        logger.warning("Ignoring invalid environment overrides: %s", e)
        return LauncherConfig.model_validate(merged)
