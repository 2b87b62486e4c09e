"""Database infrastructure for the restoration ledger persistence adapter."""

from restoration_kernel.db.base import Base, TimestampedBase
from restoration_kernel.db.types import Amount
from restoration_kernel.db.engine import (
    build_engine,
    create_tables,
    drop_tables,
    session_scope,
)

__all__ = [
    "Amount",
    "Base",
    "TimestampedBase",
    "build_engine",
    "create_tables",
    "drop_tables",
    "session_scope",
]
