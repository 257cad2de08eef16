"""Domain-level findings and the report they are collected into."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Mapping, Sequence


class Severity(str, Enum):
    PASS = "pass"
    WARNING = "warning"
    ERROR = "error"


class Category(str, Enum):
    STRUCTURAL = "structural"
    NAV = "nav"
    PORTFOLIO = "portfolio"
    ASSET = "asset"
    TEMPORAL = "temporal"
    IDENTIFIER = "identifier"
    CURRENCY = "currency"


@dataclass(frozen=True)
class EntityRef:
    """Points a finding at the entity it is about."""

    kind: str
    key: str | None = None
    fund: str | None = None

    def label(self) -> str:
        own = self.kind if self.key is None else f"{self.kind}[{self.key}]"
        if self.fund is None or self.kind == "Fund":
            return own
        return f"Fund[{self.fund}]/{own}"


DOCUMENT = EntityRef(kind="Document")


@dataclass(frozen=True)
class Finding:
    rule_id: str
    category: Category
    severity: Severity
    context: EntityRef
    message: str
    measured: Decimal | int | str | None = None
    expected: str | None = None


@dataclass(frozen=True)
class ReportSummary:
    total: int
    passed: int
    warnings: int
    errors: int
    generated_at: datetime


@dataclass(frozen=True)
class ValidationReport:
    summary: ReportSummary
    findings: Sequence[Finding] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return len(self.findings)

    def has_errors(self) -> bool:
        return self.summary.errors > 0

    def has_issues(self) -> bool:
        return self.summary.errors > 0 or self.summary.warnings > 0

    def counts_by_severity(self) -> dict[Severity, int]:
        counts = {severity: 0 for severity in Severity}
        for finding in self.findings:
            counts[finding.severity] += 1
        return counts

    def by_category(self) -> Mapping[Category, tuple[Finding, ...]]:
        grouped: dict[Category, list[Finding]] = defaultdict(list)
        for finding in self.findings:
            grouped[finding.category].append(finding)
        return {category: tuple(grouped[category]) for category in Category if category in grouped}

    def by_fund(self) -> Mapping[str | None, tuple[Finding, ...]]:
        """Group findings by fund key; document-level findings land under ``None``."""
        grouped: dict[str | None, list[Finding]] = {}
        for finding in self.findings:
            context = finding.context
            fund = context.key if context.kind == "Fund" else context.fund
            grouped.setdefault(fund, []).append(finding)
        return {fund: tuple(items) for fund, items in grouped.items()}

    def by_entity(self) -> Mapping[EntityRef, tuple[Finding, ...]]:
        grouped: dict[EntityRef, list[Finding]] = {}
        for finding in self.findings:
            grouped.setdefault(finding.context, []).append(finding)
        return {entity: tuple(items) for entity, items in grouped.items()}

    def iter_issues(self) -> Iterable[Finding]:
        for finding in self.findings:
            if finding.severity is not Severity.PASS:
                yield finding


class ReportBuilder:
    """Accumulates findings in insertion order."""

    def __init__(self) -> None:
        self._findings: list[Finding] = []

    def add(self, finding: Finding) -> None:
        self._findings.append(finding)

    def extend(self, findings: Iterable[Finding]) -> None:
        self._findings.extend(findings)

    def build(self, generated_at: datetime) -> ValidationReport:
        findings = tuple(self._findings)
        summary = ReportSummary(
            total=len(findings),
            passed=sum(1 for f in findings if f.severity is Severity.PASS),
            warnings=sum(1 for f in findings if f.severity is Severity.WARNING),
            errors=sum(1 for f in findings if f.severity is Severity.ERROR),
            generated_at=generated_at,
        )
        return ValidationReport(summary=summary, findings=findings)
