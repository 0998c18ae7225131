"""In-memory service registry for embedding applications and tests.

Example:
    >>> from composer.services.registry import create_in_memory_registry, Lifetime
    >>> registry = create_in_memory_registry()
    >>> registry.register_instance(Clock, SystemClock())
    >>> registry.register_factory(Logger, lambda r: ConsoleLogger(), Lifetime.TRANSIENT)
"""

from .registry import (
    InMemoryServiceRegistry,
    Lifetime,
    ServiceNotFoundError,
    create_in_memory_registry,
)

__all__ = [
    "InMemoryServiceRegistry",
    "Lifetime",
    "ServiceNotFoundError",
    "create_in_memory_registry",
]
