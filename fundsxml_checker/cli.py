"""Command-line entrypoint for FundsXML validation."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from fundsxml_checker.application.use_cases import ValidateDocumentUseCase, ValidationContext
from fundsxml_checker.config import BUILTIN_PROFILES, SETTINGS
from fundsxml_checker.domain.services import FundsDocumentValidator
from fundsxml_checker.errors import DocumentParseError, FundsXmlCheckerError
from fundsxml_checker.infrastructure.parsing.utils import parse_datetime
from fundsxml_checker.infrastructure.repositories.xml_repositories import FundsXmlRepository
from fundsxml_checker.infrastructure.storage.profile_store import load_profiles
from fundsxml_checker.presentation.findings_report import render_csv, render_excel

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_FAILURE = 2


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile and validate a FundsXML4 document")
    parser.add_argument("document", type=str, help="Path to the FundsXML4 file")
    parser.add_argument("--profile", type=str, help="Tolerance profile name (default: data_quality)")
    parser.add_argument("--as-of", type=str, help="Evaluation time (YYYY-MM-DD or ISO datetime); defaults to now")
    parser.add_argument("--profiles-file", type=Path, help="JSON file with tolerance profile overrides")
    parser.add_argument("--csv", type=Path, help="Write findings to this CSV file")
    parser.add_argument("--xlsx", type=Path, help="Write findings to this Excel workbook")
    parser.add_argument("--issues-only", action="store_true", help="Only list and export warnings and errors")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)
    if args.as_of is not None and parse_datetime(args.as_of) is None:
        parser.error(f"invalid --as-of value: {args.as_of!r}")
    return args


def _as_of(raw: str | None) -> datetime | None:
    if raw is None:
        return None
    parsed = parse_datetime(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=SETTINGS.timezone)
    return parsed


def _validator(args: argparse.Namespace) -> FundsDocumentValidator:
    settings = SETTINGS
    if args.profiles_file is not None:
        settings = replace(settings, profiles=load_profiles(BUILTIN_PROFILES, args.profiles_file))
    return FundsDocumentValidator(profile=settings.profile(args.profile))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        context = ValidationContext(
            repository=FundsXmlRepository(Path(args.document)),
            validator=_validator(args),
            source_name=args.document,
            as_of=_as_of(args.as_of),
        )
        response = ValidateDocumentUseCase(context).execute()
    except DocumentParseError as exc:
        print(f"Cannot parse {args.document}: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    except (FundsXmlCheckerError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    report = response.report
    summary = report.summary
    print("Validation Summary")
    print("==================")
    print(f"Document: {args.document} (sha256 {response.source_digest[:12]})")
    print(f"Profile: {response.request.profile_name}")
    print(f"As of: {summary.generated_at.isoformat()}")
    print(f"Funds: {len(response.document.funds)}  Assets: {len(response.document.assets)}")
    print(f"Findings: {summary.total}  Pass: {summary.passed}  Warnings: {summary.warnings}  Errors: {summary.errors}")

    findings = list(report.iter_issues()) if args.issues_only else list(report.findings)
    if findings:
        print("\nFindings:")
        for finding in findings:
            print(f"- [{finding.severity.value.upper()}] {finding.rule_id} {finding.context.label()}: {finding.message}")
    elif not report.has_issues():
        print("\nNo issues detected.")

    if args.csv is not None:
        args.csv.write_bytes(render_csv(report, issues_only=args.issues_only))
        logger.info("Wrote findings CSV to %s", args.csv)
    if args.xlsx is not None:
        args.xlsx.write_bytes(render_excel(report, issues_only=args.issues_only))
        logger.info("Wrote findings workbook to %s", args.xlsx)

    return EXIT_FINDINGS if report.has_errors() else EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
