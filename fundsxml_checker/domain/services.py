"""Domain service running the reconciliation and validation rule set."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from fundsxml_checker.config import SETTINGS

from .aggregation import DocumentAggregates, aggregate_document
from .models import FundsDocument
from .results import ReportBuilder, ValidationReport
from .rules import assets, currency, identifiers, nav, portfolio, structural, temporal
from .rules.context import EvaluationContext, Rule
from .tolerances import ToleranceProfile

logger = logging.getLogger(__name__)

# Category order of the report.
DEFAULT_RULES: tuple[Rule, ...] = (
    *structural.RULES,
    *nav.RULES,
    *portfolio.RULES,
    *assets.RULES,
    *temporal.RULES,
    *identifiers.RULES,
    *currency.RULES,
)


class FundsDocumentValidator:
    """Evaluates every rule against one document for a fixed evaluation time.

    The result depends only on the document, the tolerance profile and
    ``as_of``; evaluating the same inputs twice gives equal reports.
    """

    def __init__(
        self,
        profile: ToleranceProfile | None = None,
        rules: Sequence[Rule] | None = None,
        top_holdings: int | None = None,
        concentration_sizes: Sequence[int] | None = None,
    ) -> None:
        if profile is None:
            profile = SETTINGS.profile()
        self._profile = profile
        self._rules = tuple(rules) if rules is not None else DEFAULT_RULES
        self._top_holdings = top_holdings if top_holdings is not None else SETTINGS.top_holdings
        self._concentration_sizes = tuple(concentration_sizes or SETTINGS.concentration_sizes)

    @property
    def profile(self) -> ToleranceProfile:
        return self._profile

    def aggregate(self, document: FundsDocument) -> DocumentAggregates:
        return aggregate_document(document, self._top_holdings, self._concentration_sizes)

    def run(self, document: FundsDocument, as_of: datetime) -> tuple[ValidationReport, DocumentAggregates]:
        aggregates = self.aggregate(document)
        context = EvaluationContext(document=document, aggregates=aggregates, profile=self._profile, as_of=as_of)
        builder = ReportBuilder()
        for rule in self._rules:
            findings = list(rule(context))
            logger.debug("%s produced %d finding(s)", rule.__name__, len(findings))
            builder.extend(findings)
        report = builder.build(generated_at=as_of)
        logger.info(
            "Evaluated %d rule(s) with profile %s: %d error(s), %d warning(s), %d pass",
            len(self._rules),
            self._profile.name,
            report.summary.errors,
            report.summary.warnings,
            report.summary.passed,
        )
        return report, aggregates

    def evaluate(self, document: FundsDocument, as_of: datetime) -> ValidationReport:
        report, _ = self.run(document, as_of)
        return report
