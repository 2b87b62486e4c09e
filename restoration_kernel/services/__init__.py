"""Kernel services used by the SQL-backed ledger store."""

from restoration_kernel.services.sequence_service import SequenceCounter, SequenceService

__all__ = ["SequenceCounter", "SequenceService"]
