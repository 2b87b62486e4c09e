"""
Ledger stores.

LedgerStore defines the operation contract; InMemoryLedgerStore and
SqlLedgerStore implement it.
"""

from restoration_kernel.store.base import LedgerStore
from restoration_kernel.store.locks import KeyedLockRegistry
from restoration_kernel.store.memory import InMemoryLedgerStore
from restoration_kernel.store.sql import SqlLedgerStore

__all__ = [
    "InMemoryLedgerStore",
    "KeyedLockRegistry",
    "LedgerStore",
    "SqlLedgerStore",
]
