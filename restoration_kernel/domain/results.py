"""
LedgerResult -- the tagged success/failure value every store operation returns.

Responsibility:
    Carries either a success value or a named failure reason across the
    store boundary.  Store internals raise typed exceptions; the boundary
    converts them with ``LedgerResult.failure``.  No domain exception
    crosses the boundary.

Architecture position:
    Kernel > Domain -- pure value type, zero I/O.

Failure modes:
    - ``unwrap()`` on a failed result raises LedgerResultError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from restoration_kernel.exceptions import LedgerResultError, RestorationKernelError

T = TypeVar("T")


@dataclass(frozen=True)
class LedgerResult(Generic[T]):
    """
    Result of a ledger operation.

    Contract:
        ``ok=True`` results carry ``value`` and no error.  ``ok=False``
        results carry ``error`` (reason string) and ``code``; ``value`` is
        None.  Callers must check ``ok`` before reading ``value``.
    """

    ok: bool
    value: T | None = None
    error: str | None = None
    code: str | None = None

    @classmethod
    def success(cls, value: T) -> LedgerResult[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, exc: RestorationKernelError) -> LedgerResult[Any]:
        """Build a failed result from a kernel exception."""
        return cls(ok=False, error=exc.reason, code=exc.code)

    @property
    def is_not_found(self) -> bool:
        return self.code in ("NOT_FOUND", "PROJECT_NOT_FOUND", "SHARES_NOT_FOUND")

    def unwrap(self) -> T:
        """Return the value, or raise LedgerResultError for a failed result."""
        if not self.ok:
            raise LedgerResultError(self.code or "UNKNOWN", self.error or "")
        return self.value  # type: ignore[return-value]

    def as_dict(self) -> dict[str, Any]:
        """``{ok, value}`` or ``{ok, error, code}`` for transport adapters."""
        if self.ok:
            value = self.value.as_dict() if hasattr(self.value, "as_dict") else self.value
            return {"ok": True, "value": value}
        return {"ok": False, "error": self.error, "code": self.code}
