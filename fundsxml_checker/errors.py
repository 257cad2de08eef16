"""Custom exceptions for the FundsXML checker.

Only conditions that stop an evaluation before any rule runs are raised.
Everything the rule set can observe about the data is reported as a
finding instead.
"""
from __future__ import annotations


class FundsXmlCheckerError(Exception):
    """Base class for all checker-specific exceptions."""


class DocumentParseError(FundsXmlCheckerError):
    """Raised when the input is empty or not well-formed XML."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        message = super().__str__()
        if self.line is None:
            return message
        return f"{message} (line {self.line}, column {self.column})"


class ProfileError(FundsXmlCheckerError):
    """Raised for an unknown tolerance profile or an unusable override file."""


__all__ = ["FundsXmlCheckerError", "DocumentParseError", "ProfileError"]
