"""
SequenceService -- project id allocation from a locked counter row.

Responsibility:
    Hands out dense, strictly increasing ids for the SQL store.  Each named
    sequence is one row of ``sequence_counters``; allocation locks that row
    (``SELECT ... FOR UPDATE``), bumps it and returns the new value.

Architecture position:
    Kernel > Services.  Used by SqlLedgerStore inside the caller's
    session_scope; never commits on its own.

Invariants enforced:
    - Ids are never derived from ``MAX(projects.id) + 1``.  The counter row
      is the only source.
    - An allocation belongs to the caller's transaction: if it rolls back,
      the value is handed out again.

Failure modes:
    - A concurrent first use of the same name can collide on insert; the
      loser rolls back its savepoint and locks the winner's row.
"""

from sqlalchemy import BigInteger, String, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, Session, mapped_column

from restoration_kernel.db.base import Base
from restoration_kernel.logging_config import get_logger

logger = get_logger("services.sequence")


class SequenceCounter(Base):
    """One row per named sequence; ``current_value`` is the last id handed out."""

    __tablename__ = "sequence_counters"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    current_value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class SequenceService:
    """
    Allocates values from named counters within a caller-owned session.

    Usage:
        with session_scope(factory) as session:
            project_id = SequenceService(session).next_value(SequenceService.PROJECT)
    """

    PROJECT = "project"
    KNOWN_SEQUENCES = (PROJECT,)

    def __init__(self, session: Session):
        self._session = session

    def _locked(self, name: str) -> SequenceCounter | None:
        return self._session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == name)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def _create_or_lock(self, name: str) -> SequenceCounter:
        """Insert a zeroed counter for ``name``, or lock the one a racing session inserted."""
        savepoint = self._session.begin_nested()
        try:
            counter = SequenceCounter(name=name, current_value=0)
            self._session.add(counter)
            self._session.flush()
        except IntegrityError:
            savepoint.rollback()
            logger.debug("sequence_counter_race_retry", extra={"sequence_name": name})
            return self._locked(name)  # type: ignore[return-value]
        savepoint.commit()
        return counter

    def next_value(self, sequence_name: str) -> int:
        """Lock the counter, increment it, and return the new value (first value is 1)."""
        counter = self._locked(sequence_name) or self._create_or_lock(sequence_name)
        counter.current_value += 1
        self._session.flush()
        logger.debug(
            "sequence_allocated",
            extra={"sequence_name": sequence_name, "value": counter.current_value},
        )
        return counter.current_value

    def current_value(self, sequence_name: str) -> int | None:
        """Last allocated value without incrementing; None for an unknown sequence."""
        counter = self._session.get(SequenceCounter, sequence_name)
        return None if counter is None else counter.current_value

    def reset(self, sequence_name: str, value: int = 0) -> None:
        """Rewind a counter so the next allocation returns ``value + 1``.  Tests only."""
        counter = self._locked(sequence_name)
        if counter is None:
            self._session.add(SequenceCounter(name=sequence_name, current_value=value))
        else:
            counter.current_value = value
        self._session.flush()

    def initialize_sequences(self) -> None:
        """Insert the well-known counters at zero if missing."""
        for name in self.KNOWN_SEQUENCES:
            if self._session.get(SequenceCounter, name) is None:
                self._session.add(SequenceCounter(name=name, current_value=0))
        self._session.flush()
