"""
Module: restoration_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.
    Provides the type annotation map for consistent column types and the
    TimestampedBase mixin for audit timestamps.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the persistence adapter.  ALL model files import from here.  This
    module MUST NOT import from models/, services/, store/, or domain/.

Invariants enforced:
    - Decimal precision: type_annotation_map maps Python Decimal to the
      Amount type (Numeric(38, 9), exact text on SQLite).  NEVER use float
      for monetary amounts.
    - int maps to BigInteger, safe for monotonic project ids and share totals.
    - Audit timestamps: TimestampedBase provides created_at and updated_at.

Audit relevance:
    created_at/updated_at are audit metadata, not ledger data; they are
    maintained by the database and never read by the ledger operations.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import BigInteger, DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from restoration_kernel.db.types import Amount


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - Decimal maps to Amount (exact Numeric(38, 9)).
        - datetime maps to DateTime(timezone=True).
        - int maps to BigInteger.

    Non-goals:
        - Does NOT define a primary key; ledger tables are keyed by their
          natural keys (project id, (project id, funder), sequence name).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Amount(),
        datetime: DateTime(timezone=True),
        int: BigInteger,
    }


class TimestampedBase(Base):
    """
    Abstract base with creation and modification timestamps.

    Guarantees:
        - created_at is set to server NOW() on INSERT and never changes.
        - updated_at is set on INSERT and refreshed on every UPDATE.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
