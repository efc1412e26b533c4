"""Column types for money and rates."""

from __future__ import annotations

from decimal import ROUND_DOWN, Context, Decimal
from typing import Any

from sqlalchemy import Numeric, String
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

AMOUNT_SCALE = 18
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_SCALE)

# Wide enough that sums and products of stored amounts never round.
MONEY_CONTEXT = Context(prec=60, rounding=ROUND_DOWN)


class ExactDecimal(TypeDecorator):
    """A ``Decimal`` column that reads back exactly what was written.

    PostgreSQL keeps a ``NUMERIC``. SQLite has no decimal storage and would
    round-trip through ``float``, so there the value is stored as plain
    fixed-point text. With a ``scale`` every value is cut down to that many
    places before it is bound, which keeps the text canonical and lets
    equality comparisons in SQL work on either backend.
    """

    impl = Numeric
    cache_ok = True

    def __init__(self, precision: int | None = None, scale: int | None = None) -> None:
        super().__init__(precision, scale, asdecimal=True)
        self.quantum = Decimal(1).scaleb(-scale) if scale is not None else None

    def load_dialect_impl(self, dialect: Dialect) -> Any:
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(80))
        return dialect.type_descriptor(self.impl)

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        if value is None:
            return None
        value = Decimal(value)
        if self.quantum is not None:
            value = value.quantize(self.quantum, rounding=ROUND_DOWN, context=MONEY_CONTEXT)
        if dialect.name == "sqlite":
            return format(value, "f")
        return value

    def process_result_value(self, value: Any, dialect: Dialect) -> Decimal | None:
        if value is None:
            return None
        return Decimal(value)

    def coerce_compared_value(self, op: Any, value: Any) -> "ExactDecimal":
        return self


def amount_type() -> ExactDecimal:
    """Balances, traded amounts and fees: 38 digits, 18 of them fractional."""
    return ExactDecimal(38, AMOUNT_SCALE)


def rate_type() -> ExactDecimal:
    """Exchange rates keep every digit the price source returned."""
    return ExactDecimal()
