"""Portfolio checks: weights, total value, referential integrity, amount signs."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterator

from ..models import Fund, Portfolio
from ..results import DOCUMENT, Category, Finding, Severity
from ..tolerances import HUNDRED
from .context import EvaluationContext, portfolio_owner, portfolio_ref, position_ref

PORTFOLIO_PERCENTAGE_SUM = "PORTFOLIO_PERCENTAGE_SUM"
PORTFOLIO_TOTAL_VALUE = "PORTFOLIO_TOTAL_VALUE"
PORTFOLIO_ORPHANED_POSITION = "PORTFOLIO_ORPHANED_POSITION"
PORTFOLIO_MIXED_SIGN = "PORTFOLIO_MIXED_SIGN"


def _reference_total(fund: Fund, portfolio: Portfolio) -> Decimal | None:
    """Fund TNA, or the owning share class's TNA, in fund currency."""
    if portfolio.share_class is None:
        return fund.fund_tna
    for share_class in fund.share_classes:
        if share_class.key == portfolio.share_class:
            return share_class.total_net_asset_value.get(fund.currency)
    return None


def check_percentage_sum(ctx: EvaluationContext) -> Iterator[Finding]:
    band = ctx.profile.percentage_sum
    for figures in ctx.aggregates.funds:
        for portfolio in figures.portfolios:
            if portfolio.percentage_sum is None:
                continue
            difference = abs(portfolio.percentage_sum - HUNDRED)
            message = f"Position percentages sum to {portfolio.percentage_sum}% (difference {difference})"
            if portfolio.missing_percentage_positions:
                message += f"; {len(portfolio.missing_percentage_positions)} position(s) without a TotalPercentage"
            yield Finding(
                PORTFOLIO_PERCENTAGE_SUM,
                Category.PORTFOLIO,
                band.classify(difference),
                portfolio_ref(figures.fund_key, portfolio.ordinal),
                message,
                measured=portfolio.percentage_sum,
                expected=f"100 {band.describe()}",
            )


def check_total_value(ctx: EvaluationContext) -> Iterator[Finding]:
    band = ctx.profile.portfolio_total_value
    for fund in ctx.document.funds:
        figures = ctx.aggregates.fund(fund.ordinal)
        for portfolio, portfolio_figures in zip(fund.iter_portfolios(), figures.portfolios):
            reference = _reference_total(fund, portfolio)
            if reference is None or not portfolio.positions:
                continue
            difference = abs(portfolio_figures.value_sum - reference)
            message = (
                f"Position values sum to {portfolio_figures.value_sum} {fund.currency} "
                f"vs TNA {reference} of {portfolio_owner(fund, portfolio)} (difference {difference})"
            )
            if portfolio_figures.missing_value_positions:
                message += f"; {len(portfolio_figures.missing_value_positions)} position(s) without a {fund.currency} value"
            yield Finding(
                PORTFOLIO_TOTAL_VALUE,
                Category.PORTFOLIO,
                band.classify(difference),
                portfolio_ref(fund.key, portfolio.ordinal),
                message,
                measured=portfolio_figures.value_sum,
                expected=f"{reference} {band.describe()}",
            )


def check_orphaned_positions(ctx: EvaluationContext) -> Iterator[Finding]:
    orphans = ctx.aggregates.orphaned_positions
    for orphan in orphans:
        if orphan.unique_id is None:
            message = "Position has no UniqueID"
        else:
            message = f"Position references UniqueID {orphan.unique_id} which is not in asset master data"
        yield Finding(
            PORTFOLIO_ORPHANED_POSITION,
            Category.PORTFOLIO,
            Severity.ERROR,
            position_ref(orphan.fund_key, orphan.portfolio, orphan.position),
            message,
            measured=orphan.unique_id,
        )
    if not orphans and ctx.aggregates.referenced_ids:
        yield Finding(
            PORTFOLIO_ORPHANED_POSITION,
            Category.PORTFOLIO,
            Severity.PASS,
            DOCUMENT,
            "Every position resolves to an asset",
        )


def check_mixed_signs(ctx: EvaluationContext) -> Iterator[Finding]:
    checked = 0
    flagged = 0
    for fund, portfolio, position in ctx.document.iter_positions():
        if len(position.values) < 2:
            continue
        checked += 1
        if position.values.has_mixed_signs():
            flagged += 1
            amounts = ", ".join(f"{item.value} {item.currency}" for item in position.values)
            yield Finding(
                PORTFOLIO_MIXED_SIGN,
                Category.PORTFOLIO,
                Severity.ERROR,
                position_ref(fund.key, portfolio.ordinal, position.ordinal),
                f"Position amounts mix positive and negative values ({amounts})",
                measured=position.unique_id,
            )
    if checked and not flagged:
        yield Finding(
            PORTFOLIO_MIXED_SIGN,
            Category.PORTFOLIO,
            Severity.PASS,
            DOCUMENT,
            f"Amounts of {checked} multi-currency position(s) share one sign",
            measured=checked,
        )


RULES = (check_percentage_sum, check_total_value, check_orphaned_positions, check_mixed_signs)
