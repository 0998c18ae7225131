"""Runtime composition of Protocol contracts from registry services.

This module provides:
- ServiceComposer (entry point; lazy, memoized composition)
- ContractInspector, ServiceResolver, TypeSynthesizer, InstanceAssembler
- Data models and the composition error taxonomy
- Factory functions for creating composers

Example:
    >>> from typing import Protocol
    >>> from composer.services.composition import ServiceComposer
    >>>
    >>> class Greeter(Protocol):
    ...     clock: Clock
    ...     logger: Logger
    >>>
    >>> greeter = ServiceComposer[Greeter](registry).implementation
    >>> greeter.clock  # the Clock bound in the registry
"""

from .assembler import InstanceAssembler
from .composer import ServiceComposer
from .config import CompositionConfig
from .errors import (
    CompositionError,
    IncompleteContractError,
    NotAContractError,
    SlotBindingMismatchError,
    UnresolvedCapabilityError,
)
from .factory import compose, create_service_composer
from .inspector import ContractInspector, is_contract
from .models import CapabilitySlot, ContractMember, ContractShape, MemberKind, ResolvedSlot
from .protocols import Composer, ServiceRegistry
from .resolver import ServiceResolver
from .synthesizer import TypeSynthesizer
from .type_cache import SynthesizedTypeCache, synthesized_types

__all__ = [
    # Entry point
    "ServiceComposer",
    # Pipeline stages
    "ContractInspector",
    "ServiceResolver",
    "TypeSynthesizer",
    "InstanceAssembler",
    "SynthesizedTypeCache",
    "synthesized_types",
    "is_contract",
    # Models
    "CapabilitySlot",
    "ContractMember",
    "ContractShape",
    "MemberKind",
    "ResolvedSlot",
    # Protocols
    "ServiceRegistry",
    "Composer",
    # Configuration
    "CompositionConfig",
    # Errors
    "CompositionError",
    "NotAContractError",
    "UnresolvedCapabilityError",
    "IncompleteContractError",
    "SlotBindingMismatchError",
    # Factories
    "create_service_composer",
    "compose",
]
