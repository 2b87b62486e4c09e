"""ORM models for the restoration ledger persistence adapter."""

from restoration_kernel.models.ledger import (
    FunderContributionRecord,
    ProjectRecord,
    ShareBalanceRecord,
)
from restoration_kernel.services.sequence_service import SequenceCounter

__all__ = [
    "FunderContributionRecord",
    "ProjectRecord",
    "SequenceCounter",
    "ShareBalanceRecord",
]
