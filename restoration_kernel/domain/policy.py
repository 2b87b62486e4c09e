"""
Ledger policies -- optional validation consulted before every mutation.

Responsibility:
    Keeps validation separate from the core operations.  The default
    ``PermissivePolicy`` accepts everything the reference ledger accepts:
    negative or zero amounts, empty names, funding past the goal, and
    minting by any caller.  ``StrictPolicy`` rejects those cases with
    typed PolicyViolationError subclasses.

Architecture position:
    Kernel > Domain -- pure functions over Project snapshots, zero I/O.
    Stores call the hooks inside their critical section, after lookups and
    before any state change, so a rejection never leaves partial state.

Invariants enforced:
    - Hooks never mutate their arguments.
    - A hook that returns normally means the mutation may proceed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from restoration_kernel.domain.values import ZERO, Project
from restoration_kernel.exceptions import (
    FundingCapExceededError,
    InvalidAmountError,
    InvalidProjectDataError,
    UnauthorizedMintError,
)


class LedgerPolicy(ABC):
    """Hook points consulted by a store before each mutating operation."""

    name: str = "abstract"

    @abstractmethod
    def check_create(
        self, name: str, description: str, funding_goal: Decimal, owner: str
    ) -> None:
        ...

    @abstractmethod
    def check_fund(self, project: Project, amount: Decimal, funder: str) -> None:
        ...

    @abstractmethod
    def check_mint(
        self, project: Project, share_count: int, caller: str | None
    ) -> None:
        ...


class PermissivePolicy(LedgerPolicy):
    """Reference behavior: no validation at all."""

    name = "permissive"

    def check_create(self, name, description, funding_goal, owner) -> None:
        return None

    def check_fund(self, project, amount, funder) -> None:
        return None

    def check_mint(self, project, share_count, caller) -> None:
        return None


class StrictPolicy(LedgerPolicy):
    """
    Validating policy layered over the core operations.

    Contract:
        - Names and descriptions must be non-blank.
        - Funding goals, amounts, and share counts must be strictly positive.
        - With ``cap_at_goal``, funding may not push current_funding past
          the funding goal.
        - With ``owner_only_minting``, only the project owner may mint.
    """

    name = "strict"

    def __init__(self, *, cap_at_goal: bool = False, owner_only_minting: bool = True):
        self.cap_at_goal = cap_at_goal
        self.owner_only_minting = owner_only_minting

    def check_create(self, name, description, funding_goal, owner) -> None:
        if not name or not name.strip():
            raise InvalidProjectDataError("name")
        if not description or not description.strip():
            raise InvalidProjectDataError("description")
        if funding_goal <= ZERO:
            raise InvalidAmountError("funding_goal", funding_goal)

    def check_fund(self, project, amount, funder) -> None:
        if amount <= ZERO:
            raise InvalidAmountError("amount", amount)
        if self.cap_at_goal and project.current_funding + amount > project.funding_goal:
            raise FundingCapExceededError(
                project.project_id,
                project.funding_goal,
                project.current_funding,
                amount,
            )

    def check_mint(self, project, share_count, caller) -> None:
        if share_count <= 0:
            raise InvalidAmountError("share_count", share_count)
        if self.owner_only_minting and caller != project.owner:
            raise UnauthorizedMintError(project.project_id, caller, project.owner)
