"""Configuration for the composition engine."""

from dataclasses import dataclass
from typing import Optional

from composer.lib.config_manager import ConfigManager, config as default_config


@dataclass
class CompositionConfig:
    """Configuration for ServiceComposer and its collaborators.

    Example:
        >>> config = CompositionConfig(aggregate_failures=False)
        >>> composer = ServiceComposer(registry, Greeter, config=config)
    """

    cache_synthesized_types: bool = True  # Reuse one synthesized class per contract
    aggregate_failures: bool = True  # Report every unresolved slot, not just the first
    synthesized_module: str = "composer.synthesized"

    @classmethod
    def from_env(cls, manager: Optional[ConfigManager] = None) -> "CompositionConfig":
        """Build config from .env / environment, falling back to defaults."""
        manager = manager or default_config
        return cls(
            cache_synthesized_types=manager.get("COMPOSER_CACHE_SYNTHESIZED_TYPES"),
            aggregate_failures=manager.get("COMPOSER_AGGREGATE_RESOLUTION_FAILURES"),
            synthesized_module=manager.get("COMPOSER_SYNTHESIZED_MODULE"),
        )
