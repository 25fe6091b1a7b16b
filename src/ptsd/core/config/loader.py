"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars

Configuration is re-read on every call; a single CLI invocation owns the
project directory for its duration, and edits to ptsd.yaml between calls
take effect immediately.
"""

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ptsd.core.errors import ConfigError, StoreIOError
from ptsd.utils.yamlfile import read_yaml

from .models import PtsdConfig

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
        Path to ~/.config/ptsd/config.yaml (or XDG equivalent)
    """
    return get_xdg_config_home() / "ptsd" / "config.yaml"


def get_project_config_path(project_dir: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        project_dir: Project root (defaults to current directory)

    Returns:
        Path to .ptsd/ptsd.yaml in the project root
    """
    if project_dir is None:
        project_dir = Path.cwd()
    return project_dir / ".ptsd" / "ptsd.yaml"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    This is a recursive merge - nested dicts are merged, not replaced.

    Args:
        base: Base dictionary (lower priority)
        override: Override dictionary (higher priority)

    Returns:
        Merged dictionary with override values taking precedence

    Example:
        >>> base = {"a": 1, "b": {"x": 10, "y": 20}}
        >>> override = {"b": {"y": 30, "z": 40}, "c": 3}
        >>> deep_merge(base, override)
        {'a': 1, 'b': {'x': 10, 'y': 30, 'z': 40}, 'c': 3}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_yaml_config(path: Path) -> dict[str, Any] | None:
    """
    Load one configuration layer.

    Args:
        path: Path to a YAML config file

    Returns:
        Parsed mapping, or None if the file doesn't exist

    Raises:
        ConfigError: If the file exists but is not a valid YAML mapping
    """
    try:
        return read_yaml(path)
    except StoreIOError as e:
        raise ConfigError(f"invalid config at {path}: {e.message}") from e


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        PTSD_MIN_SCORE - overrides review.min_score
        PTSD_AUTO_REDO - overrides review.auto_redo

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if min_score_str := os.environ.get("PTSD_MIN_SCORE"):
        try:
            min_score = int(min_score_str)
            result["review"] = {**result.get("review", {}), "min_score": min_score}
        except ValueError:
            logger.warning("Invalid PTSD_MIN_SCORE value %r, ignoring", min_score_str)

    if auto_redo_str := os.environ.get("PTSD_AUTO_REDO"):
        auto_redo = auto_redo_str.lower() not in ("false", "0", "")
        result["review"] = {**result.get("review", {}), "auto_redo": auto_redo}

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "review": {"min_score": 7, "auto_redo": False},
    }


def load_config(project_dir: Path | None = None) -> PtsdConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (PTSD_*)
        2. Project config (.ptsd/ptsd.yaml)
        3. User config (~/.config/ptsd/config.yaml)
        4. Hardcoded defaults

    Args:
        project_dir: Project root to load .ptsd/ptsd.yaml from (defaults to cwd)

    Returns:
        Validated PtsdConfig instance

    Raises:
        ConfigError: If a config file is malformed or the merged config
            fails validation

    Example:
        >>> config = load_config()
        >>> config.review.min_score
        7
    """
    merged = get_default_config()

    if user_config := load_yaml_config(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    project_config_path = get_project_config_path(project_dir)
    if project_config := load_yaml_config(project_config_path):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    try:
        return PtsdConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"invalid config: {e.errors()[0]['msg']}") from e
