"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol

from .models import FundsDocument


class FundsDocumentRepository(Protocol):
    """Provides one parsed FundsXML document."""

    def load_document(self) -> FundsDocument:
        ...

    def digest(self) -> str:
        ...
