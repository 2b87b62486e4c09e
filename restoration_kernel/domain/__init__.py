"""
Pure domain layer.

Value types, running-total maps, results, and policies with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- Locks or threads
- I/O
"""

from restoration_kernel.domain.balances import BalanceMap
from restoration_kernel.domain.policy import LedgerPolicy, PermissivePolicy, StrictPolicy
from restoration_kernel.domain.results import LedgerResult
from restoration_kernel.domain.values import (
    ZERO,
    Project,
    ProjectStatus,
    add_amounts,
    to_amount,
    to_share_count,
)

__all__ = [
    "BalanceMap",
    "LedgerPolicy",
    "LedgerResult",
    "PermissivePolicy",
    "Project",
    "ProjectStatus",
    "StrictPolicy",
    "ZERO",
    "add_amounts",
    "to_amount",
    "to_share_count",
]
