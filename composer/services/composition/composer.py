"""ServiceComposer: the public entry point of the composition engine."""

import logging
import threading
from typing import Any, Optional, TypeVar, get_args

from composer.lib.logging_config import log_with_context

from .assembler import InstanceAssembler
from .config import CompositionConfig
from .errors import (
    CompositionError,
    IncompleteContractError,
    NotAContractError,
    UnresolvedCapabilityError,
    type_name,
)
from .inspector import ContractInspector, is_contract
from .models import CapabilitySlot
from .protocols import Composer, ServiceRegistry
from .resolver import ServiceResolver
from .synthesizer import TypeSynthesizer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ServiceComposer(Composer[T]):
    """Composes an object implementing contract ``T`` from registry services.

    The contract is either passed explicitly or taken from the subscription:

        >>> composer = ServiceComposer(registry, Greeter)
        >>> composer = ServiceComposer[Greeter](registry)
        >>> greeter = composer.implementation
        >>> greeter.clock is registry.resolve(Clock)
        True

    Composition runs inspect → resolve → synthesize → assemble once; the
    resulting instance is memoized and returned on every later access. Failed
    compositions are not memoized.
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        contract: Optional[type[T]] = None,
        *,
        config: Optional[CompositionConfig] = None,
        inspector: Optional[ContractInspector] = None,
        synthesizer: Optional[TypeSynthesizer] = None,
        assembler: Optional[InstanceAssembler] = None,
    ):
        """Initialize composer.

        Args:
            registry: Service registry the slots are resolved against
            contract: Protocol class to implement (optional when subscripted)
            config: Composition settings (defaults come from the environment)
            inspector: Contract inspector override
            synthesizer: Type synthesizer override
            assembler: Instance assembler override
        """
        self.registry = registry
        self._contract = contract
        self.config = config or CompositionConfig.from_env()
        self.inspector = inspector or ContractInspector()
        self.synthesizer = synthesizer or TypeSynthesizer(
            inspector=self.inspector,
            use_cache=self.config.cache_synthesized_types,
            module=self.config.synthesized_module,
        )
        self.assembler = assembler or InstanceAssembler()
        self.resolver = ServiceResolver(registry, aggregate_failures=self.config.aggregate_failures)

        self._instance: Optional[T] = None
        self._lock = threading.Lock()

    @property
    def contract(self) -> Optional[type[T]]:
        """The contract being composed, if one was given."""
        if self._contract is not None:
            return self._contract
        # Set by typing after ServiceComposer[Contract](...) returns
        alias = getattr(self, "__orig_class__", None)
        args = get_args(alias) if alias is not None else ()
        return args[0] if args else None

    @property
    def slots(self) -> tuple[CapabilitySlot, ...]:
        """Capability slots of the contract, in declaration order."""
        return self.inspector.inspect(self._require_contract())

    @property
    def implementation(self) -> T:
        """The composed instance, built on first access."""
        return self.compose()

    @property
    def is_composed(self) -> bool:
        return self._instance is not None

    def compose(self) -> T:
        """Return the composed instance, composing it on the first call.

        Raises:
            NotAContractError: Contract missing or not a Protocol (no registry calls made)
            UnresolvedCapabilityError: One or more slots have no registry binding
            IncompleteContractError: Contract declares members composition cannot implement
            SlotBindingMismatchError: Internal inconsistency between synthesis and assembly
        """
        instance = self._instance
        if instance is not None:
            return instance

        with self._lock:
            if self._instance is None:
                self._instance = self._compose()
            return self._instance

    def reset(self) -> None:
        """Forget the memoized instance; the next access composes a new one."""
        with self._lock:
            self._instance = None

    def _require_contract(self) -> type[T]:
        contract = self.contract
        if contract is None:
            raise NotAContractError(
                None, "no contract given; pass it or use ServiceComposer[Contract](registry)"
            )
        if not is_contract(contract):
            raise NotAContractError(contract)
        return contract

    def _compose(self) -> T:
        name = type_name(self.contract)
        try:
            contract = self._require_contract()
            slots = self.inspector.inspect(contract)
            resolved = self.resolver.resolve_all(slots)
            synthesized = self.synthesizer.synthesize(contract, slots)
            instance = self.assembler.assemble(synthesized, resolved)
        except CompositionError as e:
            details: dict[str, Any] = {}
            if isinstance(e, UnresolvedCapabilityError):
                details["missing"] = [type_name(t) for t in e.slot_types]
            elif isinstance(e, IncompleteContractError):
                details["member"] = e.missing_member
            log_with_context(
                logger,
                "warning",
                f"Composition of {name} failed: {e}",
                contract=name,
                error=type(e).__name__,
                **details,
            )
            raise

        log_with_context(
            logger,
            "info",
            f"Composed {name}",
            contract=name,
            slots=[slot.name for slot in slots],
            synthesized_type=synthesized.__qualname__,
        )
        return instance

    def __repr__(self) -> str:
        state = "composed" if self.is_composed else "pending"
        return f"<ServiceComposer[{type_name(self.contract)}] {state}>"
