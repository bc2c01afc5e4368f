"""
Column types.

Money is stored as an integer number of ten-thousandths. SQLite
has no exact decimal type and would round-trip Numeric through
float, which breaks exact debit/credit comparison. Integers are
exact on every backend and still support SUM in SQL.
"""

from decimal import Decimal

from sqlalchemy import BigInteger
from sqlalchemy.types import TypeDecorator

MONEY_SCALE = 4

# Largest magnitude a BigInteger of ten-thousandths can hold
MONEY_MAX = Decimal(2**63 - 1).scaleb(-MONEY_SCALE)


class Money(TypeDecorator):
    """A Decimal with up to four places, persisted as BigInteger."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = Decimal(value)
        scaled = value.scaleb(MONEY_SCALE)
        if scaled != scaled.to_integral_value():
            raise ValueError(
                f"{value} has more than {MONEY_SCALE} decimal places"
            )
        if abs(value) > MONEY_MAX:
            raise ValueError(f"{value} is outside the storable range")
        return int(scaled)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value).scaleb(-MONEY_SCALE)

    def coerce_compared_value(self, op, value):
        # Keeps literals in "balance + :delta" going through Money
        return self
