"""Date arithmetic used by the temporal and maturity rules."""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum


class MaturityBucket(str, Enum):
    EXPIRED = "Expired"
    UNDER_1Y = "<1Y"
    FROM_1Y_TO_3Y = "1-3Y"
    FROM_3Y_TO_5Y = "3-5Y"
    FROM_5Y_TO_10Y = "5-10Y"
    OVER_10Y = "10Y+"
    NO_DATA = "No maturity data"


# Half-open upper limits in days after the content date.
MATURITY_LIMITS: tuple[tuple[int, MaturityBucket], ...] = (
    (365, MaturityBucket.UNDER_1Y),
    (1095, MaturityBucket.FROM_1Y_TO_3Y),
    (1825, MaturityBucket.FROM_3Y_TO_5Y),
    (3650, MaturityBucket.FROM_5Y_TO_10Y),
)

LADDER_BUCKETS: tuple[MaturityBucket, ...] = (
    MaturityBucket.EXPIRED,
    MaturityBucket.UNDER_1Y,
    MaturityBucket.FROM_1Y_TO_3Y,
    MaturityBucket.FROM_3Y_TO_5Y,
    MaturityBucket.FROM_5Y_TO_10Y,
    MaturityBucket.OVER_10Y,
)


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole days from ``start`` to ``end`` (negative when ``end`` is earlier)."""
    return (as_date(end) - as_date(start)).days


def classify_maturity(content_date: date, maturity_date: date | None) -> MaturityBucket:
    if maturity_date is None:
        return MaturityBucket.NO_DATA
    remaining = days_between(content_date, maturity_date)
    if remaining < 0:
        return MaturityBucket.EXPIRED
    for limit, bucket in MATURITY_LIMITS:
        if remaining < limit:
            return bucket
    return MaturityBucket.OVER_10Y
