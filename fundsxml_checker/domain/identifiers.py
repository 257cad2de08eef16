"""Format checks for ISIN, LEI, BIC and ISO 4217 currency codes."""
from __future__ import annotations

import re
from dataclasses import dataclass

ISIN_PATTERN = re.compile(r"^[A-Z]{2}[A-Z0-9]{9}[0-9]$")
LEI_PATTERN = re.compile(r"^[A-Z0-9]{18}[0-9]{2}$")
BIC_PATTERN = re.compile(r"^[A-Z]{6}[A-Z0-9]{2}([A-Z0-9]{3})?$")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")

ISIN_LENGTH = 12
LEI_LENGTH = 20
BIC_LENGTHS = (8, 11)


@dataclass(frozen=True)
class FormatCheck:
    valid: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.valid


VALID = FormatCheck(True)


def check_isin(value: str) -> FormatCheck:
    if len(value) != ISIN_LENGTH:
        return FormatCheck(False, f"ISIN must be {ISIN_LENGTH} characters, got {len(value)}")
    if not ISIN_PATTERN.fullmatch(value):
        return FormatCheck(False, "ISIN must be 2 letters, 9 alphanumerics and a check digit")
    return VALID


def check_lei(value: str) -> FormatCheck:
    if len(value) != LEI_LENGTH:
        return FormatCheck(False, f"LEI must be {LEI_LENGTH} characters, got {len(value)}")
    if not LEI_PATTERN.fullmatch(value):
        return FormatCheck(False, "LEI must be 18 alphanumerics followed by 2 digits")
    return VALID


def check_bic(value: str) -> FormatCheck:
    if len(value) not in BIC_LENGTHS:
        return FormatCheck(False, f"BIC must be 8 or 11 characters, got {len(value)}")
    if not BIC_PATTERN.fullmatch(value):
        return FormatCheck(False, "BIC must be 4 letters bank code, 2 letters country, 2 alphanumerics location")
    return VALID


def check_currency(value: str) -> FormatCheck:
    if not CURRENCY_PATTERN.fullmatch(value):
        return FormatCheck(False, "currency code must be 3 upper-case letters")
    return VALID


def is_valid_isin(value: str | None) -> bool:
    return value is not None and check_isin(value).valid


def is_valid_lei(value: str | None) -> bool:
    return value is not None and check_lei(value).valid


def is_valid_bic(value: str | None) -> bool:
    return value is not None and check_bic(value).valid


def is_valid_currency(value: str | None) -> bool:
    return value is not None and check_currency(value).valid
