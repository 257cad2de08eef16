"""Tabular exports of validation findings."""
from __future__ import annotations

import csv
import io
from io import BytesIO
from typing import Iterable, Sequence

import pandas as pd

from fundsxml_checker.domain.results import Finding, Severity, ValidationReport

COLUMNS = ["rule_id", "category", "severity", "fund", "entity", "message", "measured", "expected"]

SEVERITY_COLOURS = {
    Severity.ERROR.value: "#FFC7CE",
    Severity.WARNING.value: "#FFEB9C",
}


def findings_to_rows(findings: Iterable[Finding]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for item in findings:
        context = item.context
        fund = context.key if context.kind == "Fund" else context.fund
        rows.append(
            {
                "rule_id": item.rule_id,
                "category": item.category.value,
                "severity": item.severity.value,
                "fund": fund or "",
                "entity": context.label(),
                "message": item.message,
                "measured": "" if item.measured is None else str(item.measured),
                "expected": item.expected or "",
            }
        )
    return rows


def _selected(report: ValidationReport, issues_only: bool) -> Sequence[Finding]:
    return tuple(report.iter_issues()) if issues_only else report.findings


def render_csv(report: ValidationReport, issues_only: bool = False) -> bytes:
    rows = findings_to_rows(_selected(report, issues_only))
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=COLUMNS)
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def summary_frame(report: ValidationReport) -> pd.DataFrame:
    summary = report.summary
    return pd.DataFrame(
        [
            {"metric": "total", "value": summary.total},
            {"metric": "pass", "value": summary.passed},
            {"metric": "warning", "value": summary.warnings},
            {"metric": "error", "value": summary.errors},
            {"metric": "generated_at", "value": summary.generated_at.isoformat()},
        ]
    )


def render_excel(report: ValidationReport, issues_only: bool = False) -> bytes:
    findings = pd.DataFrame(findings_to_rows(_selected(report, issues_only)), columns=COLUMNS)
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        summary_frame(report).to_excel(writer, sheet_name="summary", index=False)
        sheet = "findings"
        findings.to_excel(writer, sheet_name=sheet, index=False)
        workbook = writer.book
        worksheet = writer.sheets[sheet]
        severity_idx = COLUMNS.index("severity")
        formats = {name: workbook.add_format({"bg_color": colour}) for name, colour in SEVERITY_COLOURS.items()}
        # header occupies row 0
        for row_idx, severity in enumerate(findings["severity"], start=1):
            fmt = formats.get(severity)
            if fmt is not None:
                worksheet.write(row_idx, severity_idx, severity, fmt)
        worksheet.autofilter(0, 0, len(findings), len(COLUMNS) - 1)
    buf.seek(0)
    return buf.getvalue()
