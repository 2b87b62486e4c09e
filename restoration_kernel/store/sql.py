"""
SqlLedgerStore -- durable restoration ledger backed by SQLAlchemy.

Responsibility:
    Implements the LedgerStore contract against the projects,
    funder_contributions, share_balances, and sequence_counters tables.
    Each public operation runs in its own transaction.

Architecture position:
    Kernel > Store -- persistence adapter behind the same operation
    contracts as InMemoryLedgerStore.

Invariants enforced:
    - Project ids come from SequenceService (locked counter row), never
      from MAX(id) + 1.
    - Mutations lock the project row (SELECT ... FOR UPDATE) before reading
      or writing contribution and share rows, so operations on one project
      serialize while different projects proceed independently.
    - Every lookup and policy check runs before the first write; any
      exception rolls the whole transaction back.
    - On SQLite, which ignores FOR UPDATE (and whose in-memory databases
      share one connection), every transaction of a store runs under that
      store's serial lock.  Share one store per SQLite database.

Failure modes:
    - ProjectNotFoundError / SharesNotFoundError, converted to failed
      results by LedgerStore.
    - SQLAlchemy errors (connectivity, integrity) propagate; they are
      infrastructure failures, not ledger results.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from restoration_kernel.db.engine import build_engine, create_tables, session_scope
from restoration_kernel.domain.policy import LedgerPolicy
from restoration_kernel.domain.values import ZERO, Project, ProjectStatus, add_amounts
from restoration_kernel.exceptions import ProjectNotFoundError, SharesNotFoundError
from restoration_kernel.logging_config import get_logger
from restoration_kernel.models.ledger import (
    FunderContributionRecord,
    ProjectRecord,
    ShareBalanceRecord,
)
from restoration_kernel.services.sequence_service import SequenceService
from restoration_kernel.store.base import LedgerStore

logger = get_logger("store.sql")


class SqlLedgerStore(LedgerStore):
    """
    Ledger store persisted through a SQLAlchemy session factory.

    Contract:
        The factory must be bound to a database whose schema was created
        with ``create_tables`` and whose sequences were initialized
        (``initialize_schema`` does both).
    """

    backend = "sql"

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        policy: LedgerPolicy | None = None,
    ):
        super().__init__(policy)
        self._factory = session_factory
        engine = session_factory.kw["bind"]
        self._serial_lock = threading.RLock() if engine.dialect.name == "sqlite" else None

    @classmethod
    def from_url(
        cls,
        database_url: str,
        policy: LedgerPolicy | None = None,
        *,
        echo: bool = False,
        create_schema: bool = True,
    ) -> SqlLedgerStore:
        """Build an engine for ``database_url`` and wrap it in a store."""
        engine = build_engine(database_url, echo=echo)
        store = cls(sessionmaker(bind=engine, expire_on_commit=False), policy)
        if create_schema:
            store.initialize_schema()
        return store

    def initialize_schema(self) -> None:
        """Create tables and the project id counter (idempotent)."""
        create_tables(self._factory.kw["bind"])
        with self._transaction() as session:
            SequenceService(session).initialize_sequences()
        logger.info("sql_schema_initialized")

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _create_project(self, name, description, funding_goal, owner) -> int:
        self.policy.check_create(name, description, funding_goal, owner)
        with self._transaction() as session:
            project_id = SequenceService(session).next_value(SequenceService.PROJECT)
            session.add(
                ProjectRecord(
                    id=project_id,
                    name=name,
                    description=description,
                    funding_goal=funding_goal,
                    current_funding=ZERO,
                    owner=owner,
                    status=ProjectStatus.ACTIVE,
                )
            )
            session.flush()
            return project_id

    def _fund_project(self, project_id, amount, funder) -> Decimal:
        with self._transaction() as session:
            record = self._lock_project(session, project_id)
            self.policy.check_fund(record.to_domain(), amount, funder)

            record.current_funding = add_amounts(record.current_funding, amount)
            contribution = session.get(
                FunderContributionRecord, (project_id, funder), with_for_update=True
            )
            if contribution is None:
                session.add(
                    FunderContributionRecord(
                        project_id=project_id, funder=funder, amount=amount
                    )
                )
            else:
                contribution.amount = add_amounts(contribution.amount, amount)
            session.flush()
            return record.current_funding

    def _mint_shares(self, project_id, share_count, caller) -> int:
        with self._transaction() as session:
            record = self._lock_project(session, project_id)
            self.policy.check_mint(record.to_domain(), share_count, caller)

            balance = session.get(ShareBalanceRecord, project_id, with_for_update=True)
            if balance is None:
                balance = ShareBalanceRecord(project_id=project_id, total_shares=share_count)
                session.add(balance)
            else:
                balance.total_shares = balance.total_shares + share_count
            session.flush()
            return balance.total_shares

    def _require_shares(self, project_id) -> int:
        with self._transaction() as session:
            balance = session.get(ShareBalanceRecord, project_id)
            if balance is None or not balance.total_shares:
                raise SharesNotFoundError(project_id)
            return balance.total_shares

    def _get_project(self, project_id) -> Project:
        with self._transaction() as session:
            record = session.get(ProjectRecord, project_id)
            if record is None:
                raise ProjectNotFoundError(project_id)
            return record.to_domain()

    def _get_funder_amount(self, project_id, funder) -> Decimal:
        with self._transaction() as session:
            contribution = session.get(FunderContributionRecord, (project_id, funder))
            return contribution.amount if contribution is not None else ZERO

    def _get_share_total(self, project_id) -> int:
        with self._transaction() as session:
            balance = session.get(ShareBalanceRecord, project_id)
            return balance.total_shares if balance is not None else 0

    def _reset(self) -> None:
        with self._transaction() as session:
            session.execute(delete(FunderContributionRecord))
            session.execute(delete(ShareBalanceRecord))
            session.execute(delete(ProjectRecord))
            SequenceService(session).reset(SequenceService.PROJECT, 0)
        logger.debug("sql_store_cleared")

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """One session_scope, serialized per store when the database is SQLite."""
        if self._serial_lock is None:
            with session_scope(self._factory) as session:
                yield session
            return
        with self._serial_lock, session_scope(self._factory) as session:
            yield session

    @staticmethod
    def _lock_project(session: Session, project_id: int) -> ProjectRecord:
        record = session.execute(
            select(ProjectRecord)
            .where(ProjectRecord.id == project_id)
            .with_for_update()
        ).scalar_one_or_none()
        if record is None:
            raise ProjectNotFoundError(project_id)
        return record
