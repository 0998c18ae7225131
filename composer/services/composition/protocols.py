"""Protocol definitions for the composition engine and its collaborators.

Protocols define interfaces without implementation, enabling:
- Any DI container to act as the registry
- Easy fakes for tests
- Clear contracts between the engine and its host application
"""

from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class ServiceRegistry(Protocol):
    """Protocol for resolving a capability type to a service instance.

    Implementations:
    - InMemoryServiceRegistry: bundled thread-safe registry
    - CountingRegistry: test fake that records every lookup
    """

    def resolve(self, capability_type: type[T]) -> T:
        """Return the service bound to ``capability_type``.

        Args:
            capability_type: Contract type being requested

        Returns:
            The bound service instance

        Raises:
            LookupError: If no binding exists (a KeyError subclass is fine)
        """
        ...


class Composer(Protocol[T_co]):
    """Protocol for producing one composed implementation of a contract.

    Implementations:
    - ServiceComposer: composes from services in a ServiceRegistry
    """

    @property
    def implementation(self) -> T_co:
        """The composed instance; the same object on every access."""
        ...

    def compose(self) -> T_co:
        """Return the composed instance, composing it on the first call.

        Raises:
            CompositionError: If the contract cannot be composed
        """
        ...
