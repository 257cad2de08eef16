"""Central configuration for the FundsXML checker package."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timezone
from decimal import Context, Decimal
from typing import Mapping

from fundsxml_checker.domain.tolerances import (
    CoverageBand,
    FreshnessBands,
    NavTolerance,
    ToleranceBand,
    ToleranceProfile,
)
from fundsxml_checker.errors import ProfileError
from fundsxml_checker.infrastructure.storage.profile_store import load_profiles

# Fund TNA vs sum of share class TNA, absolute currency units.
NAV_MATCH_ABS = Decimal("0.01")
NAV_CLOSE_ABS = Decimal("1")
# Same check as a percentage of fund TNA.
NAV_MATCH_PCT = Decimal("0.01")
NAV_CLOSE_PCT = Decimal("1")

# Sum of position percentages vs 100.
PERCENTAGE_SUM_TOLERANCE = Decimal("1.0")
PERCENTAGE_SUM_EXACT = Decimal("0.01")

# NAV price x shares outstanding vs reported share class TNA, percent.
SHARE_CLASS_PRICE_OK_PCT = Decimal("1")
SHARE_CLASS_PRICE_WARN_PCT = Decimal("5")

# Sum of position values vs TNA, absolute currency units; no warning band.
PORTFOLIO_TOTAL_TOLERANCE = Decimal("1")

# Share of assets carrying an identifier, percent.
PRIMARY_COVERAGE_PASS = Decimal("90")
PRIMARY_COVERAGE_WARN = Decimal("70")
SECONDARY_COVERAGE_PASS = Decimal("50")
SECONDARY_COVERAGE_WARN = Decimal("25")

# Days since ContentDate.
FRESH_DAYS = 7
RECENT_DAYS = 30
AGING_DAYS = 90

# Days between ContentDate and DocumentGenerated.
PROCESSING_DELAY_OK_DAYS = Decimal("7")
PROCESSING_DELAY_WARN_DAYS = Decimal("30")

TOP_HOLDINGS = 15
CONCENTRATION_SIZES = (5, 10)

_SHARED_BANDS = dict(
    share_class_price=ToleranceBand(SHARE_CLASS_PRICE_OK_PCT, SHARE_CLASS_PRICE_WARN_PCT),
    portfolio_total_value=ToleranceBand(PORTFOLIO_TOTAL_TOLERANCE, inclusive=True),
    primary_identifier_coverage=CoverageBand(PRIMARY_COVERAGE_PASS, PRIMARY_COVERAGE_WARN),
    secondary_identifier_coverage=CoverageBand(SECONDARY_COVERAGE_PASS, SECONDARY_COVERAGE_WARN),
    freshness=FreshnessBands(FRESH_DAYS, RECENT_DAYS, AGING_DAYS),
    processing_delay=ToleranceBand(PROCESSING_DELAY_OK_DAYS, PROCESSING_DELAY_WARN_DAYS),
)

DATA_QUALITY_PROFILE = ToleranceProfile(
    name="data_quality",
    fund_nav_reconciliation=NavTolerance(absolute=ToleranceBand(NAV_MATCH_ABS, NAV_CLOSE_ABS)),
    percentage_sum=ToleranceBand(PERCENTAGE_SUM_TOLERANCE, inclusive=True),
    **_SHARED_BANDS,
)

NAV_RECONCILIATION_PROFILE = ToleranceProfile(
    name="nav_reconciliation",
    fund_nav_reconciliation=NavTolerance(
        absolute=ToleranceBand(NAV_MATCH_ABS, NAV_CLOSE_ABS),
        relative_pct=ToleranceBand(NAV_MATCH_PCT, NAV_CLOSE_PCT),
    ),
    percentage_sum=ToleranceBand(PERCENTAGE_SUM_EXACT, PERCENTAGE_SUM_TOLERANCE, inclusive=True),
    **_SHARED_BANDS,
)

BUILTIN_PROFILES: dict[str, ToleranceProfile] = {
    DATA_QUALITY_PROFILE.name: DATA_QUALITY_PROFILE,
    NAV_RECONCILIATION_PROFILE.name: NAV_RECONCILIATION_PROFILE,
}


@dataclass(slots=True, frozen=True)
class Settings:
    decimal_context: Context
    timezone: timezone
    profiles: Mapping[str, ToleranceProfile] = field(default_factory=dict)
    default_profile: str = DATA_QUALITY_PROFILE.name
    top_holdings: int = TOP_HOLDINGS
    concentration_sizes: tuple[int, ...] = CONCENTRATION_SIZES

    def profile(self, name: str | None = None) -> ToleranceProfile:
        key = name or self.default_profile
        try:
            return self.profiles[key]
        except KeyError:
            raise ProfileError(f"Unknown tolerance profile '{key}'. Available: {sorted(self.profiles)}") from None


SETTINGS = Settings(
    decimal_context=Context(prec=28),
    timezone=timezone.utc,
    profiles=load_profiles(BUILTIN_PROFILES),
)
