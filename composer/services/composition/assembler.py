"""Instance assembly: instantiate a synthesized type and bind its slots."""

import logging
from typing import Any, Iterable

from .errors import SlotBindingMismatchError
from .models import ResolvedSlot

logger = logging.getLogger(__name__)

_UNBOUND = object()


class InstanceAssembler:
    """Creates a composed instance with every slot bound.

    Binding goes through the accessor declared on the synthesized type, matched
    by exact slot name. Any mismatch discards the half-built instance.
    """

    def assemble(self, synthesized_type: type, resolved: Iterable[ResolvedSlot]) -> Any:
        """Instantiate ``synthesized_type`` and bind each resolved slot.

        Raises:
            SlotBindingMismatchError: If a slot has no settable accessor, or an
                accessor is left unbound
        """
        instance = synthesized_type()

        for item in resolved:
            accessor = synthesized_type.__dict__.get(item.name)
            if not isinstance(accessor, property):
                raise SlotBindingMismatchError(item.name)
            if accessor.fset is None:
                raise SlotBindingMismatchError(item.name, "accessor is read-only")
            accessor.fset(instance, item.service)

        for name, accessor in vars(synthesized_type).items():
            if isinstance(accessor, property) and self._read(accessor, instance) is _UNBOUND:
                raise SlotBindingMismatchError(name, "no resolved service for accessor")

        logger.debug(f"Assembled {synthesized_type.__qualname__}")
        return instance

    @staticmethod
    def _read(accessor: property, instance: Any) -> Any:
        try:
            value = accessor.fget(instance)
        except AttributeError:
            return _UNBOUND
        return _UNBOUND if value is None else value
