"""
BalanceMap -- keyed running totals with explicit get-or-default.

Responsibility:
    Holds the cumulative funder contributions and share totals of the
    in-memory store.  Lookups that may miss go through ``get_or_default``;
    ``contains`` answers whether a record exists at all, so a recorded zero
    and an absent record stay distinguishable.

Architecture position:
    Kernel > Domain -- pure data structure, zero I/O, no locking.
    Callers (the stores) own synchronization.
"""

from __future__ import annotations

import operator
from decimal import Decimal
from typing import Callable, Generic, Hashable, Iterator, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V", int, Decimal)


class BalanceMap(Generic[K, V]):
    """
    Mapping from key to a running total.

    Contract:
        ``add`` creates the record at ``delta`` when absent and increments
        it otherwise.  Records are never removed except by ``clear``.
    """

    def __init__(self, zero: V, adder: Callable[[V, V], V] = operator.add):
        self._zero = zero
        self._adder = adder
        self._totals: dict[K, V] = {}

    def get_or_default(self, key: K) -> V:
        """Return the recorded total, or the zero value when absent."""
        if key in self._totals:
            return self._totals[key]
        return self._zero

    def get(self, key: K) -> V | None:
        """Return the recorded total, or None when absent."""
        return self._totals.get(key)

    def contains(self, key: K) -> bool:
        return key in self._totals

    def add(self, key: K, delta: V) -> V:
        """Add ``delta`` to the total for ``key`` and return the new total."""
        total = self._adder(self.get_or_default(key), delta)
        self._totals[key] = total
        return total

    def clear(self) -> None:
        self._totals.clear()

    def keys(self) -> Iterator[K]:
        return iter(list(self._totals))

    def __len__(self) -> int:
        return len(self._totals)
