"""Factory functions for creating composers with sensible defaults."""

from typing import Optional, TypeVar

from .composer import ServiceComposer
from .config import CompositionConfig
from .protocols import Composer, ServiceRegistry

T = TypeVar("T")


def create_service_composer(
    contract: type[T],
    registry: ServiceRegistry,
    config: Optional[CompositionConfig] = None,
) -> Composer[T]:
    """Factory function to create a ServiceComposer.

    Args:
        contract: Protocol class to implement
        registry: Registry the contract's slots are resolved against
        config: Composition settings (environment defaults if omitted)

    Returns:
        ServiceComposer that composes lazily on first access

    Example:
        >>> composer = create_service_composer(Greeter, registry)
        >>> greeter = composer.implementation
    """
    return ServiceComposer(registry, contract, config=config)


def compose(
    contract: type[T],
    registry: ServiceRegistry,
    config: Optional[CompositionConfig] = None,
) -> T:
    """Compose ``contract`` once and return the instance."""
    return create_service_composer(contract, registry, config).compose()
