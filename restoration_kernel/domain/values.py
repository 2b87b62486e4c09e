"""
Values -- Immutable domain value objects for the restoration ledger.

Responsibility:
    Provides the Project snapshot, the ProjectStatus enum, and the amount
    coercion helpers used wherever monetary amounts or share counts enter
    the kernel.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by stores, policies, and the persistence adapter.

Invariants enforced:
    - Monetary amounts are Decimal inside the kernel, never float.
    - Project snapshots are frozen; an update replaces the whole value.
    - Share counts are plain ints (bool is rejected).
    - Amounts carry at most AMOUNT_DECIMAL_PLACES decimal places and stay
      below 10**AMOUNT_INTEGER_DIGITS, the range of the Numeric(38, 9)
      columns, so both stores hold exactly the same values.

Failure modes:
    - TypeError when an amount or share count has an unsupported type.
    - ValueError when a string amount is not a finite decimal number, has
      more than AMOUNT_DECIMAL_PLACES decimal places, or is out of range.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Union

ZERO = Decimal("0")

# Numeric(38, 9): 29 integer digits, 9 decimal places.
AMOUNT_DECIMAL_PLACES = 9
AMOUNT_INTEGER_DIGITS = 29
AMOUNT_CONTEXT = Context(prec=38, rounding=ROUND_HALF_UP)

_AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)
_AMOUNT_LIMIT = Decimal(10) ** AMOUNT_INTEGER_DIGITS

AmountLike = Union[Decimal, int, str, float]


class ProjectStatus(str, Enum):
    """
    Project lifecycle status.

    Only ACTIVE is produced by current operations; no transition to a
    terminal state is defined.
    """

    ACTIVE = "active"


def to_amount(value: AmountLike) -> Decimal:
    """
    Coerce a caller-supplied amount to Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` and not
    its binary expansion.

    Raises:
        TypeError: for bool or non-numeric types.
        ValueError: for strings that are not finite decimal numbers, and for
            values with more than 9 decimal places or at least 10**29 in
            magnitude.  Nothing is rounded silently.
    """
    if isinstance(value, bool):
        raise TypeError("Amount must be numeric, got bool")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {value!r}") from e
    else:
        raise TypeError(f"Amount must be numeric, got {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    if abs(result) >= _AMOUNT_LIMIT:
        raise ValueError(f"Amount out of range, got {value!r}")
    if result.quantize(_AMOUNT_QUANTUM, context=AMOUNT_CONTEXT) != result:
        raise ValueError(
            f"Amount has more than {AMOUNT_DECIMAL_PLACES} decimal places, got {value!r}"
        )
    return result


def add_amounts(left: Decimal, right: Decimal) -> Decimal:
    """Exact sum of two amounts (the default context would round past 28 digits)."""
    return AMOUNT_CONTEXT.add(left, right)


def to_share_count(value: int) -> int:
    """Validate a share count is an int (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Share count must be an int, got {type(value).__name__}")
    return value


@dataclass(frozen=True, slots=True)
class Project:
    """
    Immutable snapshot of a restoration project.

    Contract:
        Returned by ``get_project`` and stored by the in-memory store.
        Funding updates create a new snapshot via ``with_funding``.

    Guarantees:
        - project_id, name, description, funding_goal, and owner never
          change across snapshots of the same project.
        - current_funding only moves through ``with_funding``.
    """

    project_id: int
    name: str
    description: str
    funding_goal: Decimal
    current_funding: Decimal
    owner: str
    status: ProjectStatus = ProjectStatus.ACTIVE

    def with_funding(self, amount: Decimal) -> Project:
        """Return a new snapshot with ``amount`` added to current_funding."""
        return replace(self, current_funding=add_amounts(self.current_funding, amount))

    @property
    def is_goal_reached(self) -> bool:
        return self.current_funding >= self.funding_goal

    def as_dict(self) -> dict[str, Any]:
        """Plain-dict view for front-end adapters."""
        return {
            "project_id": self.project_id,
            "name": self.name,
            "description": self.description,
            "funding_goal": self.funding_goal,
            "current_funding": self.current_funding,
            "owner": self.owner,
            "status": self.status.value,
        }
