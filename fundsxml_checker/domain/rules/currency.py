"""Currency checks: code format, fund-currency completeness, consistency."""
from __future__ import annotations

from typing import Iterator

from ..identifiers import check_currency
from ..models import FundsDocument
from ..results import DOCUMENT, Category, EntityRef, Finding, Severity
from .context import EvaluationContext, asset_ref, fund_ref, portfolio_ref, position_ref, share_class_ref

CURRENCY_CODE = "CURRENCY_CODE"
CURRENCY_FUND_AMOUNT_MISSING = "CURRENCY_FUND_AMOUNT_MISSING"
CURRENCY_POSITION_ASSET_MISMATCH = "CURRENCY_POSITION_ASSET_MISMATCH"
CURRENCY_FX_RATE_MISSING = "CURRENCY_FX_RATE_MISSING"


def _currency_codes(document: FundsDocument) -> Iterator[tuple[EntityRef, str | None]]:
    for fund in document.funds:
        ref = fund_ref(fund)
        yield ref, fund.currency
        for code in fund.total_net_asset_value.currencies():
            yield ref, code
        for share_class in fund.share_classes:
            ref = share_class_ref(fund, share_class)
            yield ref, share_class.currency
            for code in share_class.total_net_asset_value.currencies():
                yield ref, code
        for portfolio in fund.iter_portfolios():
            yield portfolio_ref(fund.key, portfolio.ordinal), portfolio.currency
            for position in portfolio.positions:
                ref = position_ref(fund.key, portfolio.ordinal, position.ordinal)
                yield ref, position.currency
                for code in position.values.currencies():
                    yield ref, code
    for asset in document.assets:
        yield asset_ref(asset), asset.currency


def check_currency_codes(ctx: EvaluationContext) -> Iterator[Finding]:
    for fund in ctx.document.funds:
        if fund.currency is None:
            yield Finding(
                CURRENCY_CODE,
                Category.CURRENCY,
                Severity.ERROR,
                fund_ref(fund),
                "Fund currency is missing; fund-currency sums cannot be computed",
            )
    seen: set[tuple[EntityRef, str]] = set()
    checked = 0
    invalid = 0
    for ref, code in _currency_codes(ctx.document):
        if code is None or (ref, code) in seen:
            continue
        seen.add((ref, code))
        checked += 1
        result = check_currency(code)
        if result.valid:
            continue
        invalid += 1
        yield Finding(
            CURRENCY_CODE,
            Category.CURRENCY,
            Severity.ERROR,
            ref,
            f"Invalid currency code '{code}': {result.reason}",
            measured=code,
        )
    if checked and not invalid:
        yield Finding(
            CURRENCY_CODE,
            Category.CURRENCY,
            Severity.PASS,
            DOCUMENT,
            f"All {checked} currency code(s) are well-formed",
            measured=checked,
        )


def check_fund_currency_amounts(ctx: EvaluationContext) -> Iterator[Finding]:
    checked = 0
    missing = 0
    for fund, portfolio, position in ctx.document.iter_positions():
        if fund.currency is None:
            continue
        checked += 1
        if position.values.get(fund.currency) is not None:
            continue
        missing += 1
        held = ", ".join(position.values.currencies()) or "none"
        yield Finding(
            CURRENCY_FUND_AMOUNT_MISSING,
            Category.CURRENCY,
            Severity.WARNING,
            position_ref(fund.key, portfolio.ordinal, position.ordinal),
            f"Position {position.unique_id} has no value in fund currency {fund.currency} (currencies: {held}); "
            "it contributes zero to fund-currency sums",
            measured=held,
            expected=fund.currency,
        )
    if checked and not missing:
        yield Finding(
            CURRENCY_FUND_AMOUNT_MISSING,
            Category.CURRENCY,
            Severity.PASS,
            DOCUMENT,
            f"All {checked} position(s) carry a value in fund currency",
            measured=checked,
        )


def check_position_asset_currency(ctx: EvaluationContext) -> Iterator[Finding]:
    document = ctx.document
    for fund, portfolio, position in document.iter_positions():
        asset = document.resolve(position.unique_id)
        if asset is None or asset.currency is None or position.currency is None:
            continue
        if asset.currency == position.currency:
            continue
        yield Finding(
            CURRENCY_POSITION_ASSET_MISMATCH,
            Category.CURRENCY,
            Severity.WARNING,
            position_ref(fund.key, portfolio.ordinal, position.ordinal),
            f"Position currency {position.currency} differs from asset {asset.key} currency {asset.currency}",
            measured=position.currency,
            expected=asset.currency,
        )


def check_fx_rates(ctx: EvaluationContext) -> Iterator[Finding]:
    for fund, portfolio, position in ctx.document.iter_positions():
        if fund.currency is None or position.currency is None or position.currency == fund.currency:
            continue
        if position.fx_rates:
            continue
        yield Finding(
            CURRENCY_FX_RATE_MISSING,
            Category.CURRENCY,
            Severity.WARNING,
            position_ref(fund.key, portfolio.ordinal, position.ordinal),
            f"Position in {position.currency} carries no FX rate to fund currency {fund.currency}",
            measured=position.currency,
            expected=fund.currency,
        )


RULES = (
    check_currency_codes,
    check_fund_currency_amounts,
    check_position_asset_currency,
    check_fx_rates,
)
