"""
Module: restoration_kernel.db.types
Responsibility: the Amount column type shared by every monetary column.
Architecture position: Kernel > DB.  Imported by db/base.py and models/.
    May import domain/values.py for the precision constants only.

Invariants enforced:
    - Amounts round-trip exactly.  PostgreSQL stores them as
      Numeric(38, 9).  SQLite has no exact decimal type (its NUMERIC
      affinity converts through float), so there they are stored as text.
    - No floats.  Values bound to an Amount column must be Decimal (or int).

Failure modes:
    - TypeError when a float is bound to an Amount column.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import Numeric, String
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator, TypeEngine

from restoration_kernel.domain.values import AMOUNT_DECIMAL_PLACES, AMOUNT_INTEGER_DIGITS

AMOUNT_PRECISION = AMOUNT_INTEGER_DIGITS + AMOUNT_DECIMAL_PLACES


class Amount(TypeDecorator):
    """Exact monetary amount: Numeric(38, 9), or text on SQLite."""

    impl = Numeric(AMOUNT_PRECISION, AMOUNT_DECIMAL_PLACES)
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "sqlite":
            # sign + 29 integer digits + point + 9 places
            return dialect.type_descriptor(String(AMOUNT_PRECISION + 2))
        return dialect.type_descriptor(
            Numeric(AMOUNT_PRECISION, AMOUNT_DECIMAL_PLACES, asdecimal=True)
        )

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        if value is None:
            return None
        if isinstance(value, float):
            raise TypeError("Amount columns do not accept float")
        value = Decimal(value)
        if dialect.name == "sqlite":
            return format(value, "f")
        return value

    def process_result_value(self, value: Any, dialect: Dialect) -> Decimal | None:
        if value is None:
            return None
        return Decimal(value) if not isinstance(value, Decimal) else value
