"""Typed adapter around the external service registry."""

import logging
from typing import Any, Iterable

from .errors import UnresolvedCapabilityError, type_name
from .models import CapabilitySlot, ResolvedSlot
from .protocols import ServiceRegistry

logger = logging.getLogger(__name__)


class ServiceResolver:
    """Resolves capability slots against a registry.

    Lookups are keyed by slot type, never by slot name. Whether two slots of
    the same type receive the same instance is the registry's decision.

    Example:
        >>> resolver = ServiceResolver(registry)
        >>> resolved = resolver.resolve_all(slots)
    """

    def __init__(self, registry: ServiceRegistry, aggregate_failures: bool = True):
        """Initialize resolver.

        Args:
            registry: Anything with ``resolve(capability_type)`` raising LookupError on a miss
            aggregate_failures: Attempt every slot and report all misses together
        """
        self.registry = registry
        self.aggregate_failures = aggregate_failures

    def resolve(self, slot_type: type) -> Any:
        """Resolve one capability type.

        Raises:
            UnresolvedCapabilityError: If the registry has no binding or returns None
        """
        try:
            service = self.registry.resolve(slot_type)
        except LookupError as e:
            logger.debug(f"Registry has no binding for {type_name(slot_type)}: {e}")
            raise UnresolvedCapabilityError([slot_type]) from e

        if service is None:
            logger.debug(f"Registry returned None for {type_name(slot_type)}")
            raise UnresolvedCapabilityError([slot_type])
        return service

    def resolve_all(self, slots: Iterable[CapabilitySlot]) -> tuple[ResolvedSlot, ...]:
        """Resolve every slot, all-or-nothing.

        Returns:
            ResolvedSlots in slot order

        Raises:
            UnresolvedCapabilityError: Listing every unresolved slot type when
                aggregation is on, otherwise the first one
        """
        resolved: list[ResolvedSlot] = []
        missing: list[type] = []

        for slot in slots:
            try:
                service = self.resolve(slot.slot_type)
            except UnresolvedCapabilityError:
                if not self.aggregate_failures:
                    raise
                missing.append(slot.slot_type)
                continue
            resolved.append(ResolvedSlot(slot=slot, service=service))

        if missing:
            raise UnresolvedCapabilityError(missing)
        return tuple(resolved)
