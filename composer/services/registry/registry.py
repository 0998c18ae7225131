"""In-memory service registry with singleton and transient lifetimes."""

import logging
import threading
from enum import Enum
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Factory = Callable[["InMemoryServiceRegistry"], Any]


class Lifetime(str, Enum):
    """How often a factory binding is invoked."""

    SINGLETON = "singleton"  # once, then cached
    TRANSIENT = "transient"  # on every resolve


class ServiceNotFoundError(LookupError):
    """Raised when a capability type has no binding."""

    def __init__(self, capability_type: Any):
        self.capability_type = capability_type
        name = getattr(capability_type, "__qualname__", repr(capability_type))
        super().__init__(f"No service registered for {name}")


class InMemoryServiceRegistry:
    """Thread-safe registry keyed by capability type.

    Example:
        >>> registry = InMemoryServiceRegistry()
        >>> registry.register_instance(Clock, SystemClock())
        >>> registry.register_factory(Logger, lambda r: ConsoleLogger(), Lifetime.TRANSIENT)
        >>> registry.resolve(Clock)
    """

    def __init__(self):
        self._instances: dict[Any, Any] = {}
        self._factories: dict[Any, tuple[Factory, Lifetime]] = {}
        self._lock = threading.RLock()

    def register_instance(self, capability_type: type[T], instance: T) -> None:
        """Bind a ready-made instance (always returned as-is)."""
        if instance is None:
            raise ValueError("Cannot register None as a service instance")
        with self._lock:
            self._factories.pop(capability_type, None)
            self._instances[capability_type] = instance

    def register_factory(
        self,
        capability_type: type[T],
        factory: Callable[["InMemoryServiceRegistry"], T],
        lifetime: Lifetime = Lifetime.SINGLETON,
    ) -> None:
        """Bind a factory receiving this registry.

        Args:
            capability_type: Type the factory provides
            factory: Callable building the service; may resolve other services
            lifetime: SINGLETON builds once, TRANSIENT builds on every resolve
        """
        with self._lock:
            self._instances.pop(capability_type, None)
            self._factories[capability_type] = (factory, Lifetime(lifetime))

    def unregister(self, capability_type: Any) -> bool:
        """Remove any binding for ``capability_type``.

        Returns:
            True if a binding was removed, False if none existed
        """
        with self._lock:
            removed_instance = self._instances.pop(capability_type, None) is not None
            removed_factory = self._factories.pop(capability_type, None) is not None
            return removed_instance or removed_factory

    def is_registered(self, capability_type: Any) -> bool:
        with self._lock:
            return capability_type in self._instances or capability_type in self._factories

    def registered_types(self) -> list[Any]:
        with self._lock:
            return list(dict.fromkeys([*self._instances, *self._factories]))

    def resolve(self, capability_type: type[T]) -> T:
        """Return the service bound to ``capability_type``.

        Raises:
            ServiceNotFoundError: If nothing is bound
        """
        with self._lock:
            if capability_type in self._instances:
                return self._instances[capability_type]

            binding = self._factories.get(capability_type)
            if binding is None:
                raise ServiceNotFoundError(capability_type)

            factory, lifetime = binding
            service = factory(self)
            if lifetime is Lifetime.SINGLETON:
                # Promote so the factory never runs again
                self._instances[capability_type] = service
            return service

    def __len__(self) -> int:
        return len(self.registered_types())


def create_in_memory_registry() -> InMemoryServiceRegistry:
    """Factory function to create an empty InMemoryServiceRegistry."""
    return InMemoryServiceRegistry()
