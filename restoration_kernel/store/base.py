"""
LedgerStore -- abstract base for every restoration ledger store.

Responsibility:
    Defines the public operation contract shared by the in-memory and SQL
    stores: create_project, fund_project, mint_shares, transfer_shares,
    get_project, get_funder_amount, get_share_total, and the test-support
    reset.  Public methods coerce arguments, delegate to the abstract
    ``_``-prefixed hooks, and convert kernel exceptions into failed
    LedgerResult values.

Architecture position:
    Kernel > Store -- imperative shell.  Concrete stores implement the
    hooks; front-end adapters call only the public methods.

Invariants enforced:
    - No RestorationKernelError crosses the public boundary.
    - Hooks perform every lookup and policy check before mutating, so a
      failed call leaves state unchanged.
    - transfer_shares validates and then records nothing.

Failure modes:
    - Failed results with code PROJECT_NOT_FOUND or SHARES_NOT_FOUND.
    - Failed results with policy codes when a StrictPolicy is installed.
    - TypeError/ValueError for arguments that cannot be coerced; these are
      caller bugs and propagate unchanged.

Audit relevance:
    Every successful mutation logs one INFO record (project_created,
    project_funded, shares_minted); every failure logs
    ledger_operation_failed with the error code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Callable, TypeVar

from restoration_kernel.domain.policy import LedgerPolicy, PermissivePolicy
from restoration_kernel.domain.results import LedgerResult
from restoration_kernel.domain.values import AmountLike, Project, to_amount, to_share_count
from restoration_kernel.exceptions import RestorationKernelError
from restoration_kernel.logging_config import LogContext, get_logger

logger = get_logger("store")

T = TypeVar("T")


class LedgerStore(ABC):
    """
    Abstract ledger store.

    Contract:
        Subclasses implement the ``_``-prefixed hooks, raising
        RestorationKernelError subclasses for domain failures.  They own
        all synchronization; the base class holds no state besides the
        policy.

    Non-goals:
        - Does NOT model per-holder share ownership.
        - Does NOT authenticate identities; they are opaque strings.
    """

    backend: str = "abstract"

    def __init__(self, policy: LedgerPolicy | None = None):
        self.policy = policy or PermissivePolicy()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def create_project(
        self,
        name: str,
        description: str,
        funding_goal: AmountLike,
        owner: str,
    ) -> LedgerResult[int]:
        """Allocate the next project id and store a new active project."""
        goal = to_amount(funding_goal)
        result = self._run(
            "create_project",
            lambda: self._create_project(name, description, goal, owner),
            actor_id=owner,
        )
        if result.ok:
            logger.info(
                "project_created",
                extra={
                    "project_id": result.value,
                    "owner": owner,
                    "funding_goal": goal,
                    "backend": self.backend,
                },
            )
        return result

    def fund_project(
        self,
        project_id: int,
        amount: AmountLike,
        funder: str,
    ) -> LedgerResult[bool]:
        """Add ``amount`` to the project's funding and the funder's total."""
        value = to_amount(amount)
        result = self._run(
            "fund_project",
            lambda: self._fund_project(project_id, value, funder),
            actor_id=funder,
            project_id=project_id,
        )
        if result.ok:
            logger.info(
                "project_funded",
                extra={
                    "project_id": project_id,
                    "funder": funder,
                    "amount": value,
                    "current_funding": result.value,
                },
            )
            return LedgerResult.success(True)
        return result

    def mint_shares(
        self,
        project_id: int,
        share_count: int,
        caller: str | None = None,
    ) -> LedgerResult[bool]:
        """Add ``share_count`` to the project's aggregate share total."""
        count = to_share_count(share_count)
        result = self._run(
            "mint_shares",
            lambda: self._mint_shares(project_id, count, caller),
            actor_id=caller,
            project_id=project_id,
        )
        if result.ok:
            logger.info(
                "shares_minted",
                extra={
                    "project_id": project_id,
                    "share_count": count,
                    "total_shares": result.value,
                },
            )
            return LedgerResult.success(True)
        return result

    def transfer_shares(self, project_id: int, recipient: str) -> LedgerResult[bool]:
        """
        Validate that the project has shares, then succeed without effect.

        Per-holder ownership is not part of the data model, so there is
        nothing to move.  The call is logged so the gap stays visible.
        """
        result = self._run(
            "transfer_shares",
            lambda: self._require_shares(project_id),
            project_id=project_id,
        )
        if result.ok:
            logger.warning(
                "share_transfer_not_recorded",
                extra={
                    "project_id": project_id,
                    "recipient": recipient,
                    "total_shares": result.value,
                },
            )
            return LedgerResult.success(True)
        return result

    def get_project(self, project_id: int) -> LedgerResult[Project]:
        """Immutable snapshot of the project, or a PROJECT_NOT_FOUND failure."""
        return self._run(
            "get_project",
            lambda: self._get_project(project_id),
            project_id=project_id,
        )

    def get_funder_amount(self, project_id: int, funder: str) -> LedgerResult[Decimal]:
        """Cumulative contribution for the pair, or 0.  Never fails."""
        return LedgerResult.success(self._get_funder_amount(project_id, funder))

    def get_share_total(self, project_id: int) -> LedgerResult[int]:
        """Minted share total for the project, or 0.  Never fails."""
        return LedgerResult.success(self._get_share_total(project_id))

    def reset(self) -> None:
        """Discard all state and restart id allocation at 1.  FOR TESTING ONLY."""
        self._reset()
        logger.info("ledger_reset", extra={"backend": self.backend})

    # ------------------------------------------------------------------
    # Boundary
    # ------------------------------------------------------------------

    def _run(
        self,
        operation: str,
        fn: Callable[[], T],
        *,
        actor_id: str | None = None,
        project_id: int | None = None,
    ) -> LedgerResult[T]:
        with LogContext.bind(actor_id=actor_id, project_id=project_id):
            try:
                value = fn()
            except RestorationKernelError as exc:
                logger.warning(
                    "ledger_operation_failed",
                    extra={
                        "operation": operation,
                        "error_code": exc.code,
                        "reason": exc.reason,
                        "backend": self.backend,
                    },
                )
                return LedgerResult.failure(exc)
        return LedgerResult.success(value)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _create_project(
        self, name: str, description: str, funding_goal: Decimal, owner: str
    ) -> int:
        """Store the project and return its new id."""

    @abstractmethod
    def _fund_project(self, project_id: int, amount: Decimal, funder: str) -> Decimal:
        """Apply the funding and return the project's new current_funding."""

    @abstractmethod
    def _mint_shares(self, project_id: int, share_count: int, caller: str | None) -> int:
        """Apply the mint and return the new share total."""

    @abstractmethod
    def _require_shares(self, project_id: int) -> int:
        """Return the share total, raising SharesNotFoundError if absent or zero."""

    @abstractmethod
    def _get_project(self, project_id: int) -> Project:
        ...

    @abstractmethod
    def _get_funder_amount(self, project_id: int, funder: str) -> Decimal:
        ...

    @abstractmethod
    def _get_share_total(self, project_id: int) -> int:
        ...

    @abstractmethod
    def _reset(self) -> None:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(policy={self.policy.name!r})"

    def describe(self) -> dict[str, Any]:
        return {"backend": self.backend, "policy": self.policy.name}
