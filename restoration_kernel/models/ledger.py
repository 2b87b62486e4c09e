"""
Module: restoration_kernel.models.ledger
Responsibility: ORM persistence for the three ledger record kinds: projects,
    cumulative funder contributions, and aggregate share balances.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/values.py only.  MUST NOT import from services/ or store/.

Invariants enforced:
    - projects.id is assigned by SequenceService, never by the database,
      so ids are dense and never reused.
    - (project_id, funder) is the primary key of funder_contributions:
      at most one cumulative record per pair.
    - share_balances has at most one row per project.

Failure modes:
    - IntegrityError on a duplicate project id or contribution pair
      (only possible if the sequence counter is tampered with).
"""

from decimal import Decimal

from sqlalchemy import BigInteger, Enum as SAEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from restoration_kernel.db.base import TimestampedBase
from restoration_kernel.db.types import Amount
from restoration_kernel.domain.values import Project, ProjectStatus


class ProjectRecord(TimestampedBase):
    """A restoration project row."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    funding_goal: Mapped[Decimal] = mapped_column(Amount(), nullable=False)

    current_funding: Mapped[Decimal] = mapped_column(
        Amount(),
        nullable=False,
        default=Decimal("0"),
    )

    owner: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[ProjectStatus] = mapped_column(
        SAEnum(ProjectStatus, native_enum=False, length=20),
        nullable=False,
        default=ProjectStatus.ACTIVE,
    )

    def to_domain(self) -> Project:
        """Convert to the immutable domain snapshot."""
        return Project(
            project_id=self.id,
            name=self.name,
            description=self.description,
            funding_goal=self.funding_goal,
            current_funding=self.current_funding,
            owner=self.owner,
            status=self.status,
        )


class FunderContributionRecord(TimestampedBase):
    """Cumulative amount one funder has given to one project."""

    __tablename__ = "funder_contributions"

    project_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("projects.id"),
        primary_key=True,
    )

    funder: Mapped[str] = mapped_column(String(255), primary_key=True)

    amount: Mapped[Decimal] = mapped_column(Amount(), nullable=False)


class ShareBalanceRecord(TimestampedBase):
    """Aggregate count of shares minted for a project."""

    __tablename__ = "share_balances"

    project_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("projects.id"),
        primary_key=True,
    )

    total_shares: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
