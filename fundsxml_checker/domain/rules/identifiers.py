"""Identifier format and coverage checks."""
from __future__ import annotations

from typing import Callable, Iterable, Iterator

from ..identifiers import FormatCheck, check_bic, check_isin, check_lei
from ..results import DOCUMENT, Category, EntityRef, Finding, Severity
from .context import EvaluationContext, asset_ref, fund_ref, share_class_ref

IDENTIFIER_ISIN = "IDENTIFIER_ISIN"
IDENTIFIER_LEI = "IDENTIFIER_LEI"
IDENTIFIER_BIC = "IDENTIFIER_BIC"
IDENTIFIER_COVERAGE = "IDENTIFIER_COVERAGE"


def _format_findings(
    rule_id: str,
    name: str,
    candidates: Iterable[tuple[EntityRef, str | None]],
    checker: Callable[[str], FormatCheck],
) -> Iterator[Finding]:
    checked = 0
    invalid = 0
    for ref, value in candidates:
        if value is None:
            continue
        checked += 1
        result = checker(value)
        if result.valid:
            continue
        invalid += 1
        yield Finding(
            rule_id,
            Category.IDENTIFIER,
            Severity.ERROR,
            ref,
            f"Invalid {name} '{value}': {result.reason}",
            measured=value,
        )
    if checked and not invalid:
        yield Finding(
            rule_id,
            Category.IDENTIFIER,
            Severity.PASS,
            DOCUMENT,
            f"All {checked} {name}(s) are well-formed",
            measured=checked,
        )


def check_isins(ctx: EvaluationContext) -> Iterator[Finding]:
    candidates = [
        (share_class_ref(fund, share_class), share_class.isin)
        for fund in ctx.document.funds
        for share_class in fund.share_classes
    ]
    candidates += [(asset_ref(asset), asset.identifiers.isin) for asset in ctx.document.assets]
    yield from _format_findings(IDENTIFIER_ISIN, "ISIN", candidates, check_isin)


def check_leis(ctx: EvaluationContext) -> Iterator[Finding]:
    candidates = [(fund_ref(fund), fund.lei) for fund in ctx.document.funds]
    candidates += [(asset_ref(asset), asset.identifiers.lei) for asset in ctx.document.assets]
    yield from _format_findings(IDENTIFIER_LEI, "LEI", candidates, check_lei)


def check_bics(ctx: EvaluationContext) -> Iterator[Finding]:
    candidates = [(asset_ref(asset), asset.identifiers.bic) for asset in ctx.document.assets]
    yield from _format_findings(IDENTIFIER_BIC, "BIC", candidates, check_bic)


def check_identifier_coverage(ctx: EvaluationContext) -> Iterator[Finding]:
    profile = ctx.profile
    for coverage in ctx.aggregates.identifier_coverage:
        if coverage.coverage_pct is None:
            continue
        band = profile.primary_identifier_coverage if coverage.primary else profile.secondary_identifier_coverage
        yield Finding(
            IDENTIFIER_COVERAGE,
            Category.IDENTIFIER,
            band.classify(coverage.coverage_pct),
            EntityRef(kind="Identifier", key=coverage.identifier),
            f"{coverage.present} of {coverage.total} asset(s) carry a {coverage.identifier} "
            f"({coverage.coverage_pct:.1f}%)",
            measured=coverage.coverage_pct,
            expected=band.describe(),
        )


RULES = (check_isins, check_leis, check_bics, check_identifier_coverage)
