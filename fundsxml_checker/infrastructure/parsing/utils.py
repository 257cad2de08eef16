"""Shared parsing utilities for XML ingestion."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from io import BytesIO
from pathlib import Path
import hashlib
import logging

from fundsxml_checker.config import SETTINGS

logger = logging.getLogger(__name__)


def ensure_bytes(source: BytesIO | Path | bytes | str) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    if isinstance(source, str):
        return source.encode("utf-8")
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def compute_file_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def clean_text(value: str | None) -> str | None:
    """Strip surrounding whitespace; ``None`` stays ``None`` and empty stays ``""``."""
    if value is None:
        return None
    return value.strip()


def parse_decimal(value: str | None) -> Decimal | None:
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    try:
        result = SETTINGS.decimal_context.create_decimal(s)
    except InvalidOperation:
        logger.warning("Unparseable number %r treated as absent", value)
        return None
    if not result.is_finite():
        logger.warning("Non-finite number %r treated as absent", value)
        return None
    return result


def parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        logger.warning("Unparseable date %r treated as absent", value)
        return None


def parse_datetime(value: str | None) -> datetime | None:
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        pass
    parsed = parse_date(s)
    if parsed is None:
        return None
    return datetime(parsed.year, parsed.month, parsed.day)
