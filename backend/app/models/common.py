"""
Shared column helpers for the ORM models

All timestamps are stored as naive UTC so SQLite and PostgreSQL behave the same.
"""
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import Numeric

# Money columns: 12 digits, 2 decimals
Money = Numeric(12, 2, asdecimal=True)

CENTS = Decimal("0.01")


def utcnow() -> datetime:
    """Current time as naive UTC"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an incoming datetime to naive UTC (naive values are assumed UTC)"""
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def to_money(value) -> Decimal:
    """Coerce a number to a 2-decimal Decimal"""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
