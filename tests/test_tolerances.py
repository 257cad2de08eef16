from decimal import Decimal

from fundsxml_checker.domain.results import Severity
from fundsxml_checker.domain.tolerances import (
    CoverageBand,
    Freshness,
    FreshnessBands,
    NavTolerance,
    ToleranceBand,
    relative_deviation_pct,
)


def test_band_with_warning_zone():
    band = ToleranceBand(Decimal("0.01"), Decimal("1"))

    assert band.classify(Decimal("0")) is Severity.PASS
    assert band.classify(Decimal("0.5")) is Severity.WARNING
    assert band.classify(Decimal("-0.5")) is Severity.WARNING
    assert band.classify(Decimal("1")) is Severity.ERROR
    assert band.classify(Decimal("1.5")) is Severity.ERROR


def test_inclusive_band_without_warning_zone():
    band = ToleranceBand(Decimal("1"), inclusive=True)

    assert band.classify(Decimal("1")) is Severity.PASS
    assert band.classify(Decimal("1.01")) is Severity.ERROR
    assert band.describe("%") == "<= 1%"


def test_coverage_band():
    band = CoverageBand(Decimal("90"), Decimal("70"))

    assert band.classify(Decimal("90")) is Severity.PASS
    assert band.classify(Decimal("75")) is Severity.WARNING
    assert band.classify(Decimal("69.9")) is Severity.ERROR


def test_relative_deviation_guards_zero_reference():
    assert relative_deviation_pct(Decimal("0"), Decimal("5")) is None
    assert relative_deviation_pct(Decimal("200"), Decimal("202")) == Decimal("1")


def test_nav_tolerance_prefers_relative_band_for_positive_reference():
    tolerance = NavTolerance(
        absolute=ToleranceBand(Decimal("0.01"), Decimal("1")),
        relative_pct=ToleranceBand(Decimal("0.01"), Decimal("1")),
    )

    close = tolerance.assess(Decimal("1000000"), Decimal("1000050"))
    assert close.unit == "%"
    assert close.severity is Severity.PASS

    fallback = tolerance.assess(Decimal("0"), Decimal("0.5"))
    assert fallback.unit == ""
    assert fallback.severity is Severity.WARNING


def test_freshness_labels():
    bands = FreshnessBands(7, 30, 90)

    assert bands.label(0) is Freshness.FRESH
    assert bands.label(6) is Freshness.FRESH
    assert bands.label(7) is Freshness.RECENT
    assert bands.label(30) is Freshness.AGING
    assert bands.label(89) is Freshness.AGING
    assert bands.label(90) is Freshness.STALE
