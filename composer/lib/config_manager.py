"""Configuration manager with hierarchy: .env → environment → defaults.

This module provides a centralized way to access configuration values
that supports:
1. Infrastructure-as-code via .env at the git root (loaded into the environment)
2. Process environment variables
3. Sensible hardcoded defaults (engine works out of the box)

Usage:
    from composer.lib.config_manager import config

    value = config.get("COMPOSER_CACHE_SYNTHESIZED_TYPES")
    all_config = config.get_all_sync()
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from composer.lib.defaults import DEFAULTS, get_category, get_default

logger = logging.getLogger(__name__)


def _find_git_root(start_path: Optional[Path] = None) -> Path:
    """Walk up directory tree to find .git/ folder."""
    current = start_path or Path.cwd()
    current = current.resolve()

    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent

    raise FileNotFoundError("No .git directory found in any parent directory")


def _coerce_type(value: str, default: Any) -> Any:
    """Coerce string value to match the type of the default.

    Args:
        value: String value from the environment
        default: Default value (determines target type)

    Returns:
        Value coerced to appropriate type
    """
    if default is None:
        return value

    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes", "on")
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            return default
    if isinstance(default, float):
        try:
            return float(value)
        except ValueError:
            return default
    return value


class ConfigManager:
    """Manages configuration with .env → environment → defaults hierarchy.

    The .env file is loaded lazily on first access so that importing the
    package never touches the filesystem.
    """

    def __init__(self, env_path: Optional[Path] = None):
        """Initialize the config manager.

        Args:
            env_path: Explicit .env location (defaults to <git root>/.env)
        """
        self._env_path = env_path
        self._env_loaded = False

    def _load_env(self) -> None:
        """Load .env file from git root (or the explicit path)."""
        if self._env_loaded:
            return

        env_path = self._env_path
        if env_path is None:
            try:
                env_path = _find_git_root() / ".env"
            except FileNotFoundError:
                logger.debug("Could not find git root, .env not loaded")

        if env_path is not None:
            if env_path.exists():
                load_dotenv(dotenv_path=env_path, override=False)
                logger.debug(f"Loaded .env from {env_path}")
            else:
                logger.debug(f"No .env file found at {env_path}")

        self._env_loaded = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value (.env / environment → defaults).

        Args:
            key: Configuration key
            default: Override default (uses DEFAULTS if not provided)

        Returns:
            Configuration value coerced to the default's type
        """
        self._load_env()

        env_value = os.getenv(key)
        if env_value is not None:
            default_val = default if default is not None else get_default(key)
            return _coerce_type(env_value, default_val)

        if default is not None:
            return default
        return get_default(key)

    def get_all_sync(self) -> dict[str, Any]:
        """Get all configuration values.

        Returns:
            Dictionary of all config keys and their resolved values
        """
        return {key: self.get(key) for key in DEFAULTS}

    def get_category(self, category: str) -> dict[str, Any]:
        """Get resolved values for one config category.

        Args:
            category: Category name (e.g., "composition", "logging")

        Returns:
            Dictionary of the category's keys and their resolved values
        """
        return {key: self.get(key) for key in DEFAULTS if get_category(key) == category}


# Singleton instance
config = ConfigManager()
