from datetime import date, datetime, timedelta

from fundsxml_checker.domain.dates import MaturityBucket, classify_maturity, days_between

CONTENT_DATE = date(2024, 1, 1)


def test_maturity_buckets():
    assert classify_maturity(CONTENT_DATE, date(2024, 6, 1)) is MaturityBucket.UNDER_1Y
    assert classify_maturity(CONTENT_DATE, date(2023, 1, 1)) is MaturityBucket.EXPIRED
    assert classify_maturity(CONTENT_DATE, date(2026, 1, 1)) is MaturityBucket.FROM_1Y_TO_3Y
    assert classify_maturity(CONTENT_DATE, date(2028, 6, 1)) is MaturityBucket.FROM_3Y_TO_5Y
    assert classify_maturity(CONTENT_DATE, date(2030, 1, 1)) is MaturityBucket.FROM_5Y_TO_10Y
    assert classify_maturity(CONTENT_DATE, None) is MaturityBucket.NO_DATA


def test_maturity_bucket_limits_are_half_open():
    assert classify_maturity(CONTENT_DATE, CONTENT_DATE) is MaturityBucket.UNDER_1Y
    assert classify_maturity(CONTENT_DATE, CONTENT_DATE + timedelta(days=364)) is MaturityBucket.UNDER_1Y
    assert classify_maturity(CONTENT_DATE, CONTENT_DATE + timedelta(days=365)) is MaturityBucket.FROM_1Y_TO_3Y
    assert classify_maturity(CONTENT_DATE, CONTENT_DATE + timedelta(days=3649)) is MaturityBucket.FROM_5Y_TO_10Y
    assert classify_maturity(CONTENT_DATE, CONTENT_DATE + timedelta(days=3650)) is MaturityBucket.OVER_10Y


def test_days_between_accepts_datetimes():
    assert days_between(date(2024, 1, 31), datetime(2024, 2, 1, 8, 0)) == 1
    assert days_between(date(2024, 2, 1), date(2024, 1, 31)) == -1
