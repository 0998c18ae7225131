"""Runtime synthesis of concrete classes implementing a contract.

For a contract such as::

    class Greeter(Protocol):
        clock: Clock
        logger: Logger

the synthesizer builds the equivalent of::

    class GreeterInstance(Greeter):
        __slots__ = ("_slot_clock", "_slot_logger")
        _slot_clock: Clock
        _slot_logger: Logger

        @property
        def clock(self) -> Clock:
            return self._slot_clock

        @clock.setter
        def clock(self, service: Clock) -> None:
            self._slot_clock = service

        ...
"""

import logging
import types
from typing import Any, Iterable, Optional

from .errors import IncompleteContractError, NotAContractError, SlotBindingMismatchError, type_name
from .inspector import ContractInspector, is_contract
from .models import CapabilitySlot, ContractMember, MemberKind
from .type_cache import SynthesizedTypeCache, synthesized_types

logger = logging.getLogger(__name__)

DEFAULT_SYNTHESIZED_MODULE = "composer.synthesized"


def backing_fields(contract: type, slots: Iterable[CapabilitySlot]) -> dict[str, str]:
    """Map each slot name to the private field that stores its service.

    Fields are named ``_slot_<name>`` with leading underscores stripped from
    the slot name, so Python never mangles them. A trailing ``_`` is added
    until the field clashes with no slot and no attribute of the contract.
    """
    slots = tuple(slots)
    taken = set(dir(contract)) | {slot.name for slot in slots}
    fields: dict[str, str] = {}
    for slot in slots:
        field = f"_slot_{slot.name.lstrip('_')}"
        while field in taken:
            field += "_"
        taken.add(field)
        fields[slot.name] = field
    return fields


def _accessor(slot: CapabilitySlot, field: str) -> property:
    def fget(self):
        return getattr(self, field)

    def fset(self, service):
        setattr(self, field, service)

    fget.__name__ = fset.__name__ = slot.name
    fget.__annotations__ = {"return": slot.slot_type}
    fset.__annotations__ = {"service": slot.slot_type, "return": None}
    return property(fget, fset, doc=f"{slot.name} capability ({type_name(slot.slot_type)})")


def _composed_repr(self) -> str:
    fields = type(self).__slot_fields__
    bound = ", ".join(
        slot.name for slot in type(self).__capability_slots__
        if hasattr(self, fields[slot.name])
    )
    return f"<{type(self).__qualname__} bound=[{bound}]>"


def _why_uncovered(member: ContractMember) -> str:
    if member.kind in (MemberKind.METHOD, MemberKind.CONSTANT):
        return f"{member.kind.value} members are not composable"
    if not member.writable:
        return f"{member.kind.value} is read-only"
    return f"declared type {type_name(member.declared_type)} is not a contract"


class TypeSynthesizer:
    """Builds one concrete class per contract.

    The class subclasses the contract, declares one private backing field and
    one get/set property per slot, and nothing else.
    """

    def __init__(
        self,
        inspector: Optional[ContractInspector] = None,
        cache: Optional[SynthesizedTypeCache] = None,
        use_cache: bool = True,
        module: str = DEFAULT_SYNTHESIZED_MODULE,
    ):
        """Initialize synthesizer.

        Args:
            inspector: Used to explain which contract member cannot be implemented
            cache: Type cache (defaults to the process-wide one)
            use_cache: Build a fresh class on every call when False
            module: ``__module__`` given to synthesized classes
        """
        self.inspector = inspector or ContractInspector()
        self.cache = cache if cache is not None else synthesized_types
        self.use_cache = use_cache
        self.module = module

    def synthesize(self, contract: Any, slots: Iterable[CapabilitySlot]) -> type:
        """Return a concrete class implementing ``contract`` through ``slots``.

        Raises:
            NotAContractError: If ``contract`` is not a Protocol class
            IncompleteContractError: If a contract member is not covered by a slot
            SlotBindingMismatchError: If a slot names something the contract lacks
        """
        if not is_contract(contract):
            raise NotAContractError(contract)

        slots = tuple(slots)
        self.check_complete(contract, slots)

        if not self.use_cache:
            return self._build(contract, slots)
        return self.cache.get_or_create(contract, lambda: self._build(contract, slots))

    def check_complete(self, contract: type, slots: tuple[CapabilitySlot, ...]) -> None:
        """Verify the slots implement every member of the contract, and nothing else."""
        shape = self.inspector.describe(contract)
        member_names = {member.name for member in shape.members}
        slot_names = {slot.name for slot in slots}

        for member in shape.members:
            if member.name not in slot_names:
                raise IncompleteContractError(contract, member.name, _why_uncovered(member))

        for slot in slots:
            if slot.name not in member_names:
                raise SlotBindingMismatchError(
                    slot.name, f"not a member of {type_name(contract)}"
                )

    def _build(self, contract: type, slots: tuple[CapabilitySlot, ...]) -> type:
        name = f"{contract.__name__}Instance"
        fields = backing_fields(contract, slots)
        namespace: dict[str, Any] = {
            "__slots__": tuple(fields[slot.name] for slot in slots),
            "__annotations__": {fields[slot.name]: slot.slot_type for slot in slots},
            "__module__": self.module,
            "__qualname__": name,
            "__doc__": f"Composed implementation of {type_name(contract)}.",
            "__composed_contract__": contract,
            "__capability_slots__": slots,
            "__slot_fields__": fields,
            "__repr__": _composed_repr,
        }
        for slot in slots:
            namespace[slot.name] = _accessor(slot, fields[slot.name])

        synthesized = types.new_class(name, (contract,), exec_body=lambda ns: ns.update(namespace))
        logger.debug(f"Synthesized {self.module}.{name} with slots {[s.name for s in slots]}")
        return synthesized
