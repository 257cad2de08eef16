"""FundsXML4 reconciliation and data-quality toolkit."""
from fundsxml_checker.application.use_cases import ValidateDocumentUseCase, ValidationContext
from fundsxml_checker.domain.services import FundsDocumentValidator
from fundsxml_checker.errors import DocumentParseError, FundsXmlCheckerError, ProfileError
from fundsxml_checker.infrastructure.parsing.fundsxml import parse_fundsxml
from fundsxml_checker.infrastructure.repositories.xml_repositories import FundsXmlRepository

__all__ = [
    "ValidateDocumentUseCase",
    "ValidationContext",
    "FundsDocumentValidator",
    "FundsXmlRepository",
    "parse_fundsxml",
    "DocumentParseError",
    "FundsXmlCheckerError",
    "ProfileError",
]
