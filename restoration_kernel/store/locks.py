"""
KeyedLockRegistry -- one lock per logical key.

Responsibility:
    The in-memory counterpart of row-level locking (``SELECT ... FOR
    UPDATE``): operations on the same key serialize, operations on
    different keys proceed in parallel.

Architecture position:
    Kernel > Store -- infrastructure used by InMemoryLedgerStore.

Invariants enforced:
    - Locks exist only for keys the owner registered with ``lock_for``.
      ``get`` never creates one, so lookups on unknown keys cannot grow
      the registry.
    - ``hold_all`` takes every registered lock, in registration order.
      Callers that hold it must not create new locks meanwhile.
"""

from __future__ import annotations

import threading
from contextlib import ExitStack, contextmanager
from typing import Hashable, Iterator


class KeyedLockRegistry:
    """``threading.Lock`` per registered key."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}

    def lock_for(self, key: Hashable) -> threading.Lock:
        """Return the lock for ``key``, registering it on first use."""
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def get(self, key: Hashable) -> threading.Lock | None:
        with self._guard:
            return self._locks.get(key)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        with self.lock_for(key):
            yield

    @contextmanager
    def hold_all(self) -> Iterator[None]:
        """Hold every registered lock for the duration of the block."""
        with self._guard:
            locks = list(self._locks.values())
        with ExitStack() as stack:
            for lock in locks:
                stack.enter_context(lock)
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
