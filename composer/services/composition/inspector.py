"""Contract inspection: turn a Protocol class into its capability slots."""

import inspect
import logging
from typing import Any, ClassVar, get_origin, get_type_hints

from typing_extensions import get_protocol_members, is_protocol

from .errors import NotAContractError
from .models import CapabilitySlot, ContractMember, ContractShape, MemberKind

logger = logging.getLogger(__name__)

_UNSET = object()


def is_contract(tp: Any) -> bool:
    """True if ``tp`` is an interface-shaped type (a Protocol class)."""
    return isinstance(tp, type) and is_protocol(tp)


def _own_annotation_names(cls: type) -> list[str]:
    try:
        return list(inspect.get_annotations(cls))
    except NameError:
        return []


def _declaration_order(contract: type, names: frozenset[str]) -> list[str]:
    """Order member names from the most basic protocol down to ``contract``.

    Annotations come before other namespace entries within one class, so the
    order is only approximately the source order.
    """
    ordered: list[str] = []
    for base in reversed(contract.__mro__):
        if not is_protocol(base):
            continue
        for name in _own_annotation_names(base) + list(vars(base)):
            if name in names and name not in ordered:
                ordered.append(name)
    ordered.extend(sorted(names.difference(ordered)))
    return ordered


def _lookup_declaration(contract: type, name: str) -> Any:
    for base in contract.__mro__:
        namespace = vars(base)
        if name in namespace:
            return namespace[name]
        if name in _own_annotation_names(base):
            return _UNSET
    return _UNSET


def _property_type(prop: property) -> Any:
    if prop.fget is None:
        return None
    try:
        return get_type_hints(prop.fget).get("return")
    except NameError:
        return None


class ContractInspector:
    """Extracts the ordered capability slots of a contract.

    A slot is a member that is both readable and writable and whose declared
    type is itself a contract. Everything else is reported as a plain member
    and left out of the slot list. Results are memoized per contract.
    """

    def __init__(self):
        self._shapes: dict[type, ContractShape] = {}

    def inspect(self, contract: Any) -> tuple[CapabilitySlot, ...]:
        """Return the contract's capability slots in declaration order.

        Raises:
            NotAContractError: If ``contract`` is not a Protocol class
        """
        return self.describe(contract).slots

    def describe(self, contract: Any) -> ContractShape:
        """Return every member of the contract along with its slots."""
        if not is_contract(contract):
            raise NotAContractError(contract)

        shape = self._shapes.get(contract)
        if shape is None:
            shape = self._build_shape(contract)
            self._shapes[contract] = shape
        return shape

    def _build_shape(self, contract: type) -> ContractShape:
        try:
            hints = get_type_hints(contract)
        except NameError as e:
            raise NotAContractError(contract, f"unresolvable annotation: {e}") from e

        names = frozenset(get_protocol_members(contract))
        members = tuple(
            self._classify(contract, name, hints)
            for name in _declaration_order(contract, names)
        )
        slots = tuple(
            CapabilitySlot(name=member.name, slot_type=member.declared_type)
            for member in members
            if member.readable and member.writable and is_contract(member.declared_type)
        )

        logger.debug(
            f"Inspected {contract.__qualname__}: {len(slots)} slot(s) of {len(members)} member(s)"
        )
        return ContractShape(contract=contract, members=members, slots=slots)

    def _classify(self, contract: type, name: str, hints: dict[str, Any]) -> ContractMember:
        value = _lookup_declaration(contract, name)

        if isinstance(value, property):
            return ContractMember(
                name=name,
                kind=MemberKind.PROPERTY,
                declared_type=_property_type(value),
                readable=value.fget is not None,
                writable=value.fset is not None,
            )

        if name not in hints and (
            isinstance(value, (staticmethod, classmethod)) or callable(value)
        ):
            return ContractMember(name=name, kind=MemberKind.METHOD)

        if name in hints:
            declared = hints[name]
            if get_origin(declared) is ClassVar:
                return ContractMember(
                    name=name, kind=MemberKind.ATTRIBUTE, declared_type=declared, readable=True
                )
            return ContractMember(
                name=name,
                kind=MemberKind.ATTRIBUTE,
                declared_type=declared,
                readable=True,
                writable=True,
            )

        return ContractMember(name=name, kind=MemberKind.CONSTANT, readable=True)
