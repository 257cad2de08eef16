"""Application-level DTOs for FundsXML validation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from fundsxml_checker.domain.aggregation import DocumentAggregates
from fundsxml_checker.domain.models import FundsDocument
from fundsxml_checker.domain.results import ValidationReport


@dataclass(slots=True, frozen=True)
class ValidationRequest:
    source_name: str
    profile_name: str
    as_of: datetime


@dataclass(slots=True, frozen=True)
class ValidationResponse:
    request: ValidationRequest
    source_digest: str
    document: FundsDocument
    report: ValidationReport
    aggregates: DocumentAggregates
