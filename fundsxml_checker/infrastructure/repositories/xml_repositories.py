"""XML-backed repository for FundsXML documents."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path

from fundsxml_checker.domain.models import FundsDocument
from fundsxml_checker.domain.repositories import FundsDocumentRepository
from fundsxml_checker.infrastructure.parsing.fundsxml import parse_fundsxml
from fundsxml_checker.infrastructure.parsing.utils import compute_file_hash, ensure_bytes


class FundsXmlRepository(FundsDocumentRepository):
    def __init__(self, source: BytesIO | Path | bytes | str) -> None:
        if isinstance(source, str):
            source = Path(source)
        self._source = ensure_bytes(source)

    def load_document(self) -> FundsDocument:
        return parse_fundsxml(self._source)

    def digest(self) -> str:
        return compute_file_hash(self._source)
