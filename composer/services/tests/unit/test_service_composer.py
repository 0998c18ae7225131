"""Tests for ServiceComposer, the end-to-end composition entry point."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from composer.services.composition import (
    Composer,
    CompositionConfig,
    IncompleteContractError,
    NotAContractError,
    ServiceComposer,
    TypeSynthesizer,
    UnresolvedCapabilityError,
    compose,
    create_service_composer,
)
from composer.services.tests.fakes import (
    AbstractGreeter,
    Auditor,
    BrokenRegistry,
    Clock,
    CountingRegistry,
    ExtendedGreeter,
    FixedClock,
    Greeter,
    GreeterImpl,
    ListLogger,
    Logger,
    Mailer,
    NamedGreeter,
    Nothing,
    ShadowingGreeter,
    SlottedGreeter,
)


@pytest.mark.unit
class TestCompose:
    """Happy-path composition."""

    def test_greeter_example(self, registry, clock, logger_service):
        greeter = ServiceComposer(registry, Greeter).compose()

        assert greeter.clock is clock
        assert greeter.logger is logger_service
        assert isinstance(greeter, Greeter)

    def test_every_slot_holds_registry_instance(self, registry):
        composed = ServiceComposer(registry, ExtendedGreeter).compose()

        for slot_type, name in [(Clock, "clock"), (Logger, "logger"), (Mailer, "mailer")]:
            assert getattr(composed, name) is registry.bindings[slot_type]

    def test_subscripted_contract(self, registry, clock):
        composer = ServiceComposer[Greeter](registry)

        assert composer.contract is Greeter
        assert composer.implementation.clock is clock

    def test_composed_services_are_usable(self, registry, logger_service):
        greeter = ServiceComposer(registry, Greeter).implementation

        greeter.logger.log(f"hello at {greeter.clock.now():%H:%M}")

        assert logger_service.messages == ["hello at 12:00"]

    def test_empty_contract(self, registry):
        composed = ServiceComposer(registry, Nothing).compose()

        assert Nothing in type(composed).__mro__
        assert registry.calls == []

    def test_in_memory_registry(self, in_memory_registry, clock):
        assert ServiceComposer(in_memory_registry, Greeter).compose().clock is clock

    def test_slots_property(self, registry):
        composer = ServiceComposer(registry, ExtendedGreeter)

        assert [slot.name for slot in composer.slots] == ["clock", "logger", "mailer"]
        assert registry.calls == []

    def test_slotted_contract_with_underscored_slot(self, registry, clock, logger_service):
        composed = ServiceComposer(registry, SlottedGreeter).compose()

        assert composed._clock is clock
        assert composed.logger is logger_service
        assert not hasattr(composed, "__dict__")

    def test_members_named_like_backing_fields(self, registry, clock):
        composed = ServiceComposer(registry, ShadowingGreeter).compose()

        for name in ["clock", "_clock", "_slot_clock", "_clock_service"]:
            assert getattr(composed, name) is clock
        assert registry.calls == [Clock] * 4


@pytest.mark.unit
class TestMemoization:
    """Repeated access returns the one composed instance."""

    def test_repeated_calls_return_identical_instance(self, registry):
        composer = ServiceComposer(registry, Greeter)

        first = composer.compose()

        assert composer.compose() is first
        assert composer.implementation is first
        assert composer.is_composed
        assert registry.calls == [Clock, Logger]

    def test_reset_composes_again(self, transient_registry):
        composer = ServiceComposer(transient_registry, Greeter)
        first = composer.compose()

        composer.reset()
        second = composer.compose()

        assert second is not first
        assert type(second) is type(first)

    def test_failure_is_not_memoized(self):
        registry = CountingRegistry({Clock: FixedClock()})
        composer = ServiceComposer(registry, Greeter)

        with pytest.raises(UnresolvedCapabilityError):
            composer.compose()
        assert not composer.is_composed

        registry.bindings[Logger] = ListLogger()

        assert composer.compose().logger is registry.bindings[Logger]

    def test_concurrent_access_composes_once(self, clock, logger_service):
        registry = CountingRegistry({Clock: clock, Logger: logger_service}, delay=0.01)
        composer = ServiceComposer(registry, Greeter)
        barrier = threading.Barrier(8)

        def access():
            barrier.wait()
            return composer.implementation

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: access(), range(8)))

        assert len({id(result) for result in results}) == 1
        assert registry.calls == [Clock, Logger]

    def test_independent_composers_share_type_not_instance(self, transient_registry):
        first = ServiceComposer(transient_registry, Greeter).compose()
        second = ServiceComposer(transient_registry, Greeter).compose()

        assert type(first) is type(second)
        assert first is not second
        assert first.clock is not second.clock
        assert first.logger is not second.logger

    def test_uncached_types(self, registry):
        config = CompositionConfig(cache_synthesized_types=False)

        first = ServiceComposer(registry, Greeter, config=config).compose()
        second = ServiceComposer(registry, Greeter, config=config).compose()

        assert type(first) is not type(second)
        assert [s.name for s in type(first).__capability_slots__] == [
            s.name for s in type(second).__capability_slots__
        ]


@pytest.mark.unit
class TestFailures:
    """Composition is all-or-nothing."""

    @pytest.mark.parametrize("target", [GreeterImpl, AbstractGreeter, FixedClock])
    def test_not_a_contract_makes_no_registry_calls(self, registry, target):
        composer = ServiceComposer(registry, target)

        with pytest.raises(NotAContractError):
            composer.compose()

        assert registry.calls == []
        assert not composer.is_composed

    def test_missing_contract(self, registry):
        with pytest.raises(NotAContractError, match="no contract given"):
            ServiceComposer(registry).compose()

        assert registry.calls == []

    def test_missing_logger_binding(self, clock):
        registry = CountingRegistry({Clock: clock})

        with pytest.raises(UnresolvedCapabilityError) as exc_info:
            ServiceComposer(registry, Greeter).compose()

        assert exc_info.value.slot_types == (Logger,)
        assert "Logger" in str(exc_info.value)

    def test_reports_all_missing_bindings(self):
        with pytest.raises(UnresolvedCapabilityError) as exc_info:
            ServiceComposer(CountingRegistry(), ExtendedGreeter).compose()

        assert exc_info.value.slot_types == (Clock, Logger, Mailer)

    def test_first_missing_binding_only(self):
        config = CompositionConfig(aggregate_failures=False)

        with pytest.raises(UnresolvedCapabilityError) as exc_info:
            ServiceComposer(CountingRegistry(), ExtendedGreeter, config=config).compose()

        assert exc_info.value.slot_types == (Clock,)

    def test_incomplete_contract(self, registry):
        with pytest.raises(IncompleteContractError) as exc_info:
            ServiceComposer(registry, NamedGreeter).compose()

        assert exc_info.value.missing_member == "name"

    def test_custom_synthesizer(self, registry, type_cache):
        synthesizer = TypeSynthesizer(cache=type_cache)

        composed = ServiceComposer(registry, Auditor, synthesizer=synthesizer).compose()

        assert type_cache.get(Auditor) is type(composed)
        assert composed.logger is composed.audit_log

    def test_registry_errors_other_than_lookup_propagate(self):
        error = RuntimeError("registry offline")
        composer = ServiceComposer(BrokenRegistry(error), Greeter)

        with pytest.raises(RuntimeError) as exc_info:
            composer.compose()

        assert exc_info.value is error
        assert not composer.is_composed


@pytest.mark.unit
class TestLogging:
    def test_logs_successful_composition(self, registry, caplog):
        caplog.set_level(logging.INFO, logger="composer.services.composition.composer")

        ServiceComposer(registry, Greeter).compose()

        (record,) = [r for r in caplog.records if r.getMessage() == "Composed Greeter"]
        assert record.contract == "Greeter"
        assert record.slots == ["clock", "logger"]
        assert record.synthesized_type == "GreeterInstance"

    def test_logs_failure(self, caplog):
        caplog.set_level(logging.WARNING, logger="composer.services.composition.composer")

        with pytest.raises(UnresolvedCapabilityError):
            ServiceComposer(CountingRegistry(), Greeter).compose()

        (record,) = [
            r for r in caplog.records
            if r.name.endswith(".composer") and r.levelno == logging.WARNING
        ]
        assert record.contract == "Greeter"
        assert record.error == "UnresolvedCapabilityError"
        assert record.missing == ["Clock", "Logger"]

    def test_logs_incomplete_member(self, registry, caplog):
        caplog.set_level(logging.WARNING, logger="composer.services.composition.composer")

        with pytest.raises(IncompleteContractError):
            ServiceComposer(registry, NamedGreeter).compose()

        (record,) = [r for r in caplog.records if r.name.endswith(".composer")]
        assert record.error == "IncompleteContractError"
        assert record.member == "name"


@pytest.mark.unit
class TestFactories:
    def test_create_service_composer(self, registry):
        composer = create_service_composer(Greeter, registry)

        assert isinstance(composer, ServiceComposer)
        assert composer.contract is Greeter
        assert not composer.is_composed

    def test_composer_protocol(self, registry):
        def greet_time(composer: Composer[Greeter]) -> str:
            return f"{composer.implementation.clock.now():%H:%M}"

        composer = create_service_composer(Greeter, registry)

        assert Composer in type(composer).__mro__
        assert greet_time(composer) == "12:00"

    def test_compose_function(self, registry, clock):
        assert compose(Greeter, registry).clock is clock

    def test_repr(self, registry):
        composer = ServiceComposer(registry, Greeter)
        assert repr(composer) == "<ServiceComposer[Greeter] pending>"

        composer.compose()
        assert repr(composer) == "<ServiceComposer[Greeter] composed>"
