"""Tolerance bands and the named profiles that bundle them.

A band turns a measured deviation (or coverage) into a severity. Report
variants disagree on the bands for the same check, so every variant keeps its
own profile instead of sharing one set of limits.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .results import Severity

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ToleranceBand:
    """Upper limits on an absolute deviation: within ``pass_within`` passes,
    within ``warn_within`` warns, anything larger is an error."""

    pass_within: Decimal
    warn_within: Decimal | None = None
    inclusive: bool = False

    def _within(self, deviation: Decimal, limit: Decimal) -> bool:
        return deviation <= limit if self.inclusive else deviation < limit

    def classify(self, deviation: Decimal) -> Severity:
        deviation = abs(deviation)
        if self._within(deviation, self.pass_within):
            return Severity.PASS
        if self.warn_within is not None and self._within(deviation, self.warn_within):
            return Severity.WARNING
        return Severity.ERROR

    def describe(self, unit: str = "") -> str:
        op = "<=" if self.inclusive else "<"
        text = f"{op} {self.pass_within}{unit}"
        if self.warn_within is not None:
            text += f" (warning {op} {self.warn_within}{unit})"
        return text


@dataclass(frozen=True)
class CoverageBand:
    """Lower limits on a coverage percentage."""

    pass_at_least: Decimal
    warn_at_least: Decimal

    def classify(self, coverage_pct: Decimal) -> Severity:
        if coverage_pct >= self.pass_at_least:
            return Severity.PASS
        if coverage_pct >= self.warn_at_least:
            return Severity.WARNING
        return Severity.ERROR

    def describe(self) -> str:
        return f">= {self.pass_at_least}% (warning >= {self.warn_at_least}%)"


def relative_deviation_pct(reference: Decimal, measured: Decimal) -> Decimal | None:
    """``|measured - reference| / |reference| * 100``; ``None`` when the reference is zero."""
    if reference == 0:
        return None
    return abs(measured - reference) / abs(reference) * HUNDRED


@dataclass(frozen=True)
class Assessment:
    severity: Severity
    deviation: Decimal
    unit: str
    expected: str


@dataclass(frozen=True)
class NavTolerance:
    """NAV reconciliation limits.

    With ``relative_pct`` set, the deviation is measured as a percentage of
    the reference whenever the reference is positive; otherwise the absolute
    band applies.
    """

    absolute: ToleranceBand
    relative_pct: ToleranceBand | None = None

    def assess(self, reference: Decimal, measured: Decimal) -> Assessment:
        if self.relative_pct is not None and reference > 0:
            deviation = abs(measured - reference) / reference * HUNDRED
            band = self.relative_pct
            unit = "%"
        else:
            deviation = abs(measured - reference)
            band = self.absolute
            unit = ""
        return Assessment(band.classify(deviation), deviation, unit, band.describe(unit))


class Freshness(str, Enum):
    FRESH = "fresh"
    RECENT = "recent"
    AGING = "aging"
    STALE = "stale"


FRESHNESS_SEVERITY: dict[Freshness, Severity] = {
    Freshness.FRESH: Severity.PASS,
    Freshness.RECENT: Severity.PASS,
    Freshness.AGING: Severity.WARNING,
    Freshness.STALE: Severity.ERROR,
}


@dataclass(frozen=True)
class FreshnessBands:
    fresh_below: int
    recent_below: int
    aging_below: int

    def label(self, age_days: int) -> Freshness:
        if age_days < self.fresh_below:
            return Freshness.FRESH
        if age_days < self.recent_below:
            return Freshness.RECENT
        if age_days < self.aging_below:
            return Freshness.AGING
        return Freshness.STALE


@dataclass(frozen=True)
class ToleranceProfile:
    name: str
    fund_nav_reconciliation: NavTolerance
    percentage_sum: ToleranceBand
    share_class_price: ToleranceBand
    portfolio_total_value: ToleranceBand
    primary_identifier_coverage: CoverageBand
    secondary_identifier_coverage: CoverageBand
    freshness: FreshnessBands
    processing_delay: ToleranceBand
