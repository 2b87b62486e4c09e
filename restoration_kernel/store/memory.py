"""
InMemoryLedgerStore -- memory-resident restoration ledger.

Responsibility:
    Owns the project id counter, the project snapshots, the cumulative
    funder contributions, and the aggregate share totals, all behind a
    per-project lock.

Architecture position:
    Kernel > Store -- the reference implementation of LedgerStore.

Invariants enforced:
    - Project ids are allocated 1, 2, 3, ... under the id lock and never
      reused (reset() is the only way back to 1).
    - fund_project updates current_funding and the funder's contribution
      inside one critical section, so their sums agree.
    - Reads take the same per-project lock as writes, so no partial update
      is ever observed.
    - A project's lock is registered when the project is created.  Reads
      and writes on unknown ids never register one, so the lock registry
      is bounded by the highest id ever allocated.

Lock ordering:
    The id lock is taken before any project lock (only create_project and
    reset take it).  Project locks are never held while taking the id lock,
    and only reset holds more than one project lock at a time.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator

from restoration_kernel.domain.balances import BalanceMap
from restoration_kernel.domain.policy import LedgerPolicy
from restoration_kernel.domain.values import ZERO, Project, ProjectStatus, add_amounts
from restoration_kernel.exceptions import ProjectNotFoundError, SharesNotFoundError
from restoration_kernel.logging_config import get_logger
from restoration_kernel.store.base import LedgerStore
from restoration_kernel.store.locks import KeyedLockRegistry

logger = get_logger("store.memory")


class InMemoryLedgerStore(LedgerStore):
    """
    Thread-safe in-memory ledger.

    Contract:
        Constructed once per ledger; state lives on the instance, never in
        module globals.  Safe for concurrent callers, reset() included.
    """

    backend = "memory"

    def __init__(self, policy: LedgerPolicy | None = None):
        super().__init__(policy)
        self._id_lock = threading.Lock()
        self._project_locks = KeyedLockRegistry()
        self._project_counter = 0
        self._projects: dict[int, Project] = {}
        self._contributions: BalanceMap[tuple[int, str], Decimal] = BalanceMap(
            ZERO, adder=add_amounts
        )
        self._shares: BalanceMap[int, int] = BalanceMap(0)

    def _create_project(self, name, description, funding_goal, owner) -> int:
        self.policy.check_create(name, description, funding_goal, owner)
        with self._id_lock:
            self._project_counter += 1
            project_id = self._project_counter
            self._project_locks.lock_for(project_id)
            self._projects[project_id] = Project(
                project_id=project_id,
                name=name,
                description=description,
                funding_goal=funding_goal,
                current_funding=ZERO,
                owner=owner,
                status=ProjectStatus.ACTIVE,
            )
        return project_id

    def _fund_project(self, project_id, amount, funder) -> Decimal:
        with self._holding(project_id):
            project = self._lookup(project_id)
            self.policy.check_fund(project, amount, funder)
            updated = project.with_funding(amount)
            self._projects[project_id] = updated
            self._contributions.add((project_id, funder), amount)
            return updated.current_funding

    def _mint_shares(self, project_id, share_count, caller) -> int:
        with self._holding(project_id):
            project = self._lookup(project_id)
            self.policy.check_mint(project, share_count, caller)
            return self._shares.add(project_id, share_count)

    def _require_shares(self, project_id) -> int:
        with self._holding(project_id):
            total = self._shares.get(project_id)
            if not total:
                raise SharesNotFoundError(project_id)
            return total

    def _get_project(self, project_id) -> Project:
        with self._holding(project_id):
            return self._lookup(project_id)

    def _get_funder_amount(self, project_id, funder) -> Decimal:
        with self._holding(project_id):
            return self._contributions.get_or_default((project_id, funder))

    def _get_share_total(self, project_id) -> int:
        with self._holding(project_id):
            return self._shares.get_or_default(project_id)

    def _reset(self) -> None:
        # Registered locks are kept: ids restart at 1 and reuse them.
        with self._id_lock, self._project_locks.hold_all():
            self._project_counter = 0
            self._projects.clear()
            self._contributions.clear()
            self._shares.clear()
        logger.debug("memory_store_cleared")

    @contextmanager
    def _holding(self, project_id: int) -> Iterator[None]:
        """
        Hold the project's lock if the project was ever created.

        Without a registered lock there is no project and no state for it,
        so the block runs unlocked and finds nothing.
        """
        lock = self._project_locks.get(project_id)
        if lock is None:
            yield
            return
        with lock:
            yield

    def _lookup(self, project_id: int) -> Project:
        # Caller holds the project lock.
        project = self._projects.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    @property
    def project_count(self) -> int:
        with self._id_lock:
            return len(self._projects)
