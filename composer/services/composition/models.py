"""Data models describing contracts, slots and resolved services."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class MemberKind(str, Enum):
    """How a contract member is declared."""

    ATTRIBUTE = "attribute"
    PROPERTY = "property"
    METHOD = "method"
    CONSTANT = "constant"


class CapabilitySlot(BaseModel):
    """One named, contract-typed member that must be bound to a service."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Member name on the contract")
    slot_type: type[Any] = Field(..., description="Contract type the bound service must satisfy")

    def __str__(self) -> str:
        return f"{self.name}: {getattr(self.slot_type, '__qualname__', self.slot_type)}"


class ContractMember(BaseModel):
    """Any member declared by a contract, capability slot or not.

    Used to explain why a contract cannot be composed.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    kind: MemberKind
    declared_type: Optional[Any] = Field(None, description="Annotated type, if any")
    readable: bool = False
    writable: bool = False


class ContractShape(BaseModel):
    """Full inspection result for a contract."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    contract: type[Any]
    members: tuple[ContractMember, ...] = ()
    slots: tuple[CapabilitySlot, ...] = ()

    @property
    def slot_names(self) -> tuple[str, ...]:
        return tuple(slot.name for slot in self.slots)

    def uncovered_members(self) -> list[ContractMember]:
        """Members the synthesized type could not implement from the slots alone."""
        names = set(self.slot_names)
        return [member for member in self.members if member.name not in names]


class ResolvedSlot(BaseModel):
    """A capability slot paired with the service the registry returned for it.

    Lives for a single composition call.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    slot: CapabilitySlot
    service: Any

    @property
    def name(self) -> str:
        return self.slot.name
