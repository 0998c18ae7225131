"""Default configuration values for the composition engine.

All hardcoded defaults live here. The engine should be fully functional
with these defaults; any value can be overridden from the environment
or a .env file at the git root.

Config hierarchy: .env / environment → these defaults
"""

from typing import Any

# =============================================================================
# Configuration Defaults
# =============================================================================

DEFAULTS: dict[str, Any] = {
    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------
    "COMPOSER_CACHE_SYNTHESIZED_TYPES": True,
    "COMPOSER_AGGREGATE_RESOLUTION_FAILURES": True,
    "COMPOSER_SYNTHESIZED_MODULE": "composer.synthesized",

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    "COMPOSER_LOG_LEVEL": "INFO",
    "COMPOSER_SERVICE_NAME": "composer",
}


# =============================================================================
# Config Categories (for grouping in diagnostics output)
# =============================================================================

CONFIG_CATEGORIES = {
    "composition": [
        "COMPOSER_CACHE_SYNTHESIZED_TYPES",
        "COMPOSER_AGGREGATE_RESOLUTION_FAILURES",
        "COMPOSER_SYNTHESIZED_MODULE",
    ],
    "logging": [
        "COMPOSER_LOG_LEVEL",
        "COMPOSER_SERVICE_NAME",
    ],
}


def get_default(key: str) -> Any:
    """Get the default value for a config key.

    Args:
        key: Configuration key name

    Returns:
        Default value, or None if key not found
    """
    return DEFAULTS.get(key)


def get_category(key: str) -> str | None:
    """Get the category for a config key.

    Args:
        key: Configuration key name

    Returns:
        Category name, or None if not categorized
    """
    for category, keys in CONFIG_CATEGORIES.items():
        if key in keys:
            return category
    return None
