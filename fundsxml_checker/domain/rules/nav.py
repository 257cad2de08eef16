"""NAV reconciliation: fund totals, share class sums, price x shares."""
from __future__ import annotations

from typing import Iterator

from ..results import Category, Finding, Severity
from ..tolerances import relative_deviation_pct
from .context import EvaluationContext, fund_ref, share_class_ref

NAV_FUND_TOTAL_PRESENT = "NAV_FUND_TOTAL_PRESENT"
NAV_SHARE_CLASS_SUM = "NAV_SHARE_CLASS_SUM"
NAV_SHARE_CLASS_PRICE = "NAV_SHARE_CLASS_PRICE"

RECONCILIATION_LABELS = {
    Severity.PASS: "match",
    Severity.WARNING: "rounding difference",
    Severity.ERROR: "mismatch",
}


def check_fund_total(ctx: EvaluationContext) -> Iterator[Finding]:
    for fund in ctx.document.funds:
        tna = fund.fund_tna
        if tna is None:
            held = ", ".join(fund.total_net_asset_value.currencies()) or "none"
            yield Finding(
                NAV_FUND_TOTAL_PRESENT,
                Category.NAV,
                Severity.ERROR,
                fund_ref(fund),
                f"Fund TNA not reported in fund currency {fund.currency} (currencies reported: {held})",
            )
        else:
            yield Finding(
                NAV_FUND_TOTAL_PRESENT,
                Category.NAV,
                Severity.PASS,
                fund_ref(fund),
                f"Fund TNA {tna} {fund.currency}",
                measured=tna,
            )


def check_share_class_sum(ctx: EvaluationContext) -> Iterator[Finding]:
    tolerance = ctx.profile.fund_nav_reconciliation
    for fund in ctx.document.funds:
        figures = ctx.aggregates.fund(fund.ordinal)
        if figures.share_class_count == 0 or figures.total_net_asset_value is None:
            continue
        if figures.share_classes_missing_tna:
            yield Finding(
                NAV_SHARE_CLASS_SUM,
                Category.NAV,
                Severity.WARNING,
                fund_ref(fund),
                f"Cannot reconcile fund TNA: {len(figures.share_classes_missing_tna)} share class(es) "
                f"lack a TNA in {fund.currency} ({', '.join(figures.share_classes_missing_tna)})",
            )
            continue
        assessment = tolerance.assess(figures.total_net_asset_value, figures.share_class_tna_sum)
        yield Finding(
            NAV_SHARE_CLASS_SUM,
            Category.NAV,
            assessment.severity,
            fund_ref(fund),
            f"Sum of share class TNA {figures.share_class_tna_sum} vs fund TNA "
            f"{figures.total_net_asset_value} {fund.currency}: {RECONCILIATION_LABELS[assessment.severity]} "
            f"(difference {assessment.deviation}{assessment.unit})",
            measured=figures.share_class_tna_sum,
            expected=f"{figures.total_net_asset_value} {assessment.expected}",
        )


def check_share_class_price(ctx: EvaluationContext) -> Iterator[Finding]:
    band = ctx.profile.share_class_price
    for fund in ctx.document.funds:
        for share_class in fund.share_classes:
            currency = share_class.currency or fund.currency
            reported = share_class.total_net_asset_value.get(currency)
            if share_class.nav_price is None or share_class.shares_outstanding is None or reported is None:
                continue
            computed = share_class.nav_price * share_class.shares_outstanding
            deviation = relative_deviation_pct(reported, computed)
            if deviation is None:
                continue
            severity = band.classify(deviation)
            yield Finding(
                NAV_SHARE_CLASS_PRICE,
                Category.NAV,
                severity,
                share_class_ref(fund, share_class),
                f"NAV price {share_class.nav_price} x {share_class.shares_outstanding} shares = {computed} "
                f"vs reported TNA {reported} {currency} (deviation {deviation:.4f}%)",
                measured=computed,
                expected=f"{reported} {band.describe('%')}",
            )


RULES = (check_fund_total, check_share_class_sum, check_share_class_price)
