"""Shared pytest fixtures for composition tests."""

import pytest

from composer.services.composition import SynthesizedTypeCache
from composer.services.registry import InMemoryServiceRegistry
from composer.services.tests.fakes import (
    Clock,
    CountingRegistry,
    FixedClock,
    ListLogger,
    Logger,
    Mailer,
    OutboxMailer,
)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def logger_service():
    return ListLogger()


@pytest.fixture
def mailer():
    return OutboxMailer()


@pytest.fixture
def registry(clock, logger_service, mailer):
    """Counting registry with Clock, Logger and Mailer bound to fixed instances."""
    return CountingRegistry({Clock: clock, Logger: logger_service, Mailer: mailer})


@pytest.fixture
def transient_registry():
    """Counting registry building a new service on every resolve."""
    return CountingRegistry(
        {Clock: FixedClock, Logger: ListLogger, Mailer: OutboxMailer},
        transient=True,
    )


@pytest.fixture
def in_memory_registry(clock, logger_service):
    registry = InMemoryServiceRegistry()
    registry.register_instance(Clock, clock)
    registry.register_instance(Logger, logger_service)
    return registry


@pytest.fixture
def type_cache():
    """Private type cache so tests never share synthesized classes."""
    return SynthesizedTypeCache()
