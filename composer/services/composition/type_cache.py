"""Process-wide registry of synthesized types, keyed by contract."""

import threading
from typing import Callable, Optional


class SynthesizedTypeCache:
    """Append-only map from contract to its synthesized type.

    Reads are lock-free. The first synthesis for a contract runs under a
    per-contract lock, so concurrent callers for the same contract all get
    the one type that was built.
    """

    def __init__(self):
        self._types: dict[type, type] = {}
        self._locks: dict[type, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def get(self, contract: type) -> Optional[type]:
        return self._types.get(contract)

    def get_or_create(self, contract: type, factory: Callable[[], type]) -> type:
        """Return the cached type for ``contract``, building it once if absent."""
        cached = self._types.get(contract)
        if cached is not None:
            return cached

        with self._lock_for(contract):
            cached = self._types.get(contract)
            if cached is None:
                cached = factory()
                self._types[contract] = cached
        return cached

    def _lock_for(self, contract: type) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(contract)
            if lock is None:
                lock = self._locks[contract] = threading.Lock()
            return lock

    def contracts(self) -> list[type]:
        return list(self._types)

    def __contains__(self, contract: object) -> bool:
        return contract in self._types

    def __len__(self) -> int:
        return len(self._types)


# Shared by every synthesizer that is not handed its own cache
synthesized_types = SynthesizedTypeCache()
