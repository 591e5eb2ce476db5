"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < env vars

The launcher has no project config layer: the workspace it manages is
located by the configuration, not the other way round.
"""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from zenlaunch.core.errors import ConfigError

from .models import LauncherConfig

logger = logging.getLogger(__name__)


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
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/zen-launcher/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "zen-launcher" / "config.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 20}})
        {'a': 1, 'b': {'x': 10, 'y': 20}}
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

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning("Ignoring config at %s: top level must be an object", path)
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _set_nested(config_dict: dict[str, Any], section: str, key: str, value: Any) -> None:
    config_dict.setdefault(section, {})
    config_dict[section][key] = value


def apply_env_overrides(
    config_dict: dict[str, Any],
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override the config file.

    Supported env vars:
        ZEN_MCP_SERVER_DIR - overrides workspace.local_dir
        ZEN_MCP_REPO_URL - overrides workspace.repo_url
        ZEN_ENGINE_MAX_ATTEMPTS - overrides engine.max_attempts
        ZEN_ENGINE_POLL_INTERVAL - overrides engine.poll_interval

    Args:
        config_dict: Configuration dictionary to override
        environ: Environment to read (defaults to os.environ)

    Returns:
        Configuration dictionary with env var overrides applied
    """
    if environ is None:
        environ = os.environ
    result = {k: (v.copy() if isinstance(v, dict) else v) for k, v in config_dict.items()}

    if local_dir := environ.get("ZEN_MCP_SERVER_DIR"):
        _set_nested(result, "workspace", "local_dir", local_dir)

    if repo_url := environ.get("ZEN_MCP_REPO_URL"):
        _set_nested(result, "workspace", "repo_url", repo_url)

    if attempts_str := environ.get("ZEN_ENGINE_MAX_ATTEMPTS"):
        try:
            attempts = int(attempts_str)
        except ValueError:
            logger.warning("Invalid ZEN_ENGINE_MAX_ATTEMPTS value '%s', ignoring", attempts_str)
        else:
            if attempts < 1:
                logger.warning("ZEN_ENGINE_MAX_ATTEMPTS must be >= 1, got %d, ignoring", attempts)
            else:
                _set_nested(result, "engine", "max_attempts", attempts)

    if interval_str := environ.get("ZEN_ENGINE_POLL_INTERVAL"):
        try:
            interval = float(interval_str)
        except ValueError:
            logger.warning("Invalid ZEN_ENGINE_POLL_INTERVAL value '%s', ignoring", interval_str)
        else:
            if interval <= 0:
                logger.warning("ZEN_ENGINE_POLL_INTERVAL must be > 0, got %s, ignoring", interval)
            else:
                _set_nested(result, "engine", "poll_interval", interval)

    return result


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> LauncherConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (ZEN_*)
        2. User config (~/.config/zen-launcher/config.json)
        3. Model defaults

    Args:
        config_path: Explicit config file (defaults to the user config path)
        environ: Environment to read overrides from (defaults to os.environ)

    Returns:
        Validated LauncherConfig instance

    Raises:
        ConfigError: If the merged config fails validation
    """
    merged: dict[str, Any] = {}

    if config_path is None:
        config_path = get_user_config_path()
    if user_config := load_json_file(config_path):
        merged = deep_merge(merged, user_config)

    merged = apply_env_overrides(merged, environ)

    try:
        return LauncherConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid launcher configuration: {e}", source=config_path) from e
