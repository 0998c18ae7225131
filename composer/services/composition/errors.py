"""Exception taxonomy for contract composition.

Every failure aborts composition before an instance reaches the caller.
None of these are transient, so none of them are worth retrying.
"""

from typing import Any, Iterable


def type_name(tp: Any) -> str:
    """Readable name for a type (or anything else) in error messages."""
    return getattr(tp, "__qualname__", None) or getattr(tp, "__name__", None) or repr(tp)


class CompositionError(Exception):
    """Base class for all composition failures."""


class NotAContractError(CompositionError, TypeError):
    """Raised when the composition target is not a Protocol class."""

    def __init__(self, target: Any, reason: str = "expected a typing.Protocol class"):
        self.target = target
        self.reason = reason
        super().__init__(f"{type_name(target)} is not a contract: {reason}")


class UnresolvedCapabilityError(CompositionError, LookupError):
    """Raised when one or more capability slots have no registry binding.

    Attributes:
        slot_types: Every slot type the registry could not resolve, in slot order
    """

    def __init__(self, slot_types: Iterable[type]):
        self.slot_types: tuple[type, ...] = tuple(dict.fromkeys(slot_types))
        names = ", ".join(type_name(t) for t in self.slot_types)
        super().__init__(f"No registry binding for capability type(s): {names}")


class IncompleteContractError(CompositionError):
    """Raised when a contract declares a member the synthesizer cannot implement."""

    def __init__(self, contract: type, missing_member: str, detail: str = ""):
        self.contract = contract
        self.missing_member = missing_member
        message = f"{type_name(contract)}.{missing_member} cannot be implemented by composition"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SlotBindingMismatchError(CompositionError):
    """Raised when a resolved slot has no matching accessor on the synthesized type."""

    def __init__(self, name: str, detail: str = "no matching accessor"):
        self.name = name
        super().__init__(f"Cannot bind slot '{name}': {detail}")
