"""Application services orchestrating the FundsXML validation workflow."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from fundsxml_checker.config import SETTINGS
from fundsxml_checker.domain.repositories import FundsDocumentRepository
from fundsxml_checker.domain.services import FundsDocumentValidator

from .dto import ValidationRequest, ValidationResponse

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ValidationContext:
    repository: FundsDocumentRepository
    validator: FundsDocumentValidator
    source_name: str = "<memory>"
    as_of: datetime | None = None


class ValidateDocumentUseCase:
    def __init__(self, context: ValidationContext) -> None:
        self._context = context

    def execute(self) -> ValidationResponse:
        context = self._context
        as_of = context.as_of or datetime.now(SETTINGS.timezone)
        request = ValidationRequest(
            source_name=context.source_name,
            profile_name=context.validator.profile.name,
            as_of=as_of,
        )
        logger.info("Validating %s with profile %s as of %s", request.source_name, request.profile_name, as_of)
        document = context.repository.load_document()
        report, aggregates = context.validator.run(document, as_of)
        return ValidationResponse(
            request=request,
            source_digest=context.repository.digest(),
            document=document,
            report=report,
            aggregates=aggregates,
        )
