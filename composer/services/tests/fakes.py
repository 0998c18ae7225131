"""Fake contracts, services and registries for composition tests.

Contracts are declared at module level so their annotations resolve through
``typing.get_type_hints``.

Usage:
    from composer.services.tests.fakes import CountingRegistry, Greeter, Clock, Logger

    registry = CountingRegistry({Clock: FixedClock(), Logger: ListLogger()})
    greeter = ServiceComposer(registry, Greeter).compose()
"""

import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, ClassVar, Protocol, runtime_checkable


# =============================================================================
# Capability contracts (slot types)
# =============================================================================


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime: ...


@runtime_checkable
class Logger(Protocol):
    def log(self, message: str) -> None: ...


@runtime_checkable
class Mailer(Protocol):
    def send(self, to: str, body: str) -> None: ...


# =============================================================================
# Composable contracts
# =============================================================================


@runtime_checkable
class Greeter(Protocol):
    clock: Clock
    logger: Logger


class ExtendedGreeter(Greeter, Protocol):
    mailer: Mailer


class Auditor(Protocol):
    logger: Logger
    audit_log: Logger


class PropertyGreeter(Protocol):
    @property
    def clock(self) -> Clock: ...

    @clock.setter
    def clock(self, value: Clock) -> None: ...


class PrivateGreeter(Protocol):
    _clock: Clock
    logger: Logger


class SlottedGreeter(Protocol):
    __slots__ = ()

    _clock: Clock
    logger: Logger


class ShadowingGreeter(Protocol):
    """Declares members whose names look like backing fields."""

    clock: Clock
    _clock: Clock
    _slot_clock: Clock
    _clock_service: Clock


class Nothing(Protocol):
    pass


# =============================================================================
# Contracts composition cannot implement
# =============================================================================


class NamedGreeter(Protocol):
    clock: Clock
    name: str


class ChattyGreeter(Protocol):
    clock: Clock

    def greet(self) -> str: ...


class ReadOnlyGreeter(Protocol):
    @property
    def clock(self) -> Clock: ...


class SharedClock(Protocol):
    default_clock: ClassVar[Clock]


class DanglingGreeter(Protocol):
    clock: "Undefined"  # noqa: F821


# =============================================================================
# Things that are not contracts
# =============================================================================


class GreeterImpl:
    clock: Clock
    logger: Logger


class AbstractGreeter(ABC):
    @property
    @abstractmethod
    def clock(self) -> Clock: ...


# =============================================================================
# Services
# =============================================================================


class FixedClock:
    def __init__(self, moment: datetime | None = None):
        self.moment = moment or datetime(2024, 1, 1, 12, 0, 0)

    def now(self) -> datetime:
        return self.moment


class ListLogger:
    def __init__(self):
        self.messages: list[str] = []

    def log(self, message: str) -> None:
        self.messages.append(message)


class OutboxMailer:
    def __init__(self):
        self.outbox: list[tuple[str, str]] = []

    def send(self, to: str, body: str) -> None:
        self.outbox.append((to, body))


# =============================================================================
# Registries
# =============================================================================


class CountingRegistry:
    """Dict-backed registry that records every lookup.

    Attributes:
        bindings: Capability type → instance (or factory when transient)
        calls: Capability types in the order they were requested
    """

    def __init__(
        self,
        bindings: dict[type, Any] | None = None,
        transient: bool = False,
        delay: float = 0.0,
    ):
        """Initialize registry.

        Args:
            bindings: Capability type → instance, or zero-arg factory if transient
            transient: Call the bound factory on every resolve
            delay: Seconds to sleep per resolve (widens race windows)
        """
        self.bindings = dict(bindings or {})
        self.transient = transient
        self.delay = delay
        self.calls: list[type] = []
        self._lock = threading.Lock()

    def resolve(self, capability_type: type) -> Any:
        with self._lock:
            self.calls.append(capability_type)
        if self.delay:
            time.sleep(self.delay)
        if capability_type not in self.bindings:
            raise KeyError(capability_type)
        bound = self.bindings[capability_type]
        if self.transient:
            factory: Callable[[], Any] = bound
            return factory()
        return bound


class BrokenRegistry:
    """Registry whose lookups fail with something other than LookupError."""

    def __init__(self, error: Exception):
        self.error = error

    def resolve(self, capability_type: type) -> Any:
        raise self.error
