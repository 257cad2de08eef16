"""Loading of tolerance profile overrides from JSON.

The override file maps profile names to partial band settings, e.g.::

    {
        "nav_reconciliation": {"share_class_price": {"pass_within": "0.5"}},
        "strict": {"base": "data_quality", "percentage_sum": {"pass_within": "0.1"}}
    }

Names that already exist are patched; new names must say which profile they
start from.
"""
from __future__ import annotations

import json
import logging
from dataclasses import fields, is_dataclass, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping

from fundsxml_checker.domain.tolerances import ToleranceBand, ToleranceProfile
from fundsxml_checker.errors import ProfileError

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path(__file__).resolve().parents[3] / "tolerance_profiles.json"


def _coerce(name: str, current: Any, raw: Any) -> Any:
    if raw is None:
        return None
    if is_dataclass(current):
        return _merge(current, raw, name)
    if name == "relative_pct":
        return _merge(ToleranceBand(Decimal("0")), raw, name)
    if isinstance(current, bool):
        return bool(raw)
    if isinstance(current, int):
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ProfileError(f"'{name}' must be a whole number, got {raw!r}") from None
    try:
        return Decimal(str(raw))
    except InvalidOperation:
        raise ProfileError(f"'{name}' must be a number, got {raw!r}") from None


def _merge(current: Any, overrides: Any, path: str) -> Any:
    if not isinstance(overrides, dict):
        raise ProfileError(f"'{path}' must be an object, got {type(overrides).__name__}")
    known = {f.name for f in fields(current)}
    changes = {}
    for key, raw in overrides.items():
        if key not in known or key == "name":
            raise ProfileError(f"Unknown setting '{path}.{key}'")
        changes[key] = _coerce(key, getattr(current, key), raw)
    return replace(current, **changes)


def merge_profiles(
    base: Mapping[str, ToleranceProfile], overrides: Mapping[str, Any]
) -> dict[str, ToleranceProfile]:
    profiles = dict(base)
    for name, raw in overrides.items():
        if not isinstance(raw, dict):
            raise ProfileError(f"Profile '{name}' must be an object")
        settings = dict(raw)
        parent_name = settings.pop("base", name)
        parent = profiles.get(parent_name)
        if parent is None:
            raise ProfileError(f"Profile '{name}' extends unknown profile '{parent_name}'")
        merged = _merge(parent, settings, name)
        profiles[name] = replace(merged, name=name)
    return profiles


def load_profiles(base: Mapping[str, ToleranceProfile], path: Path | None = None) -> dict[str, ToleranceProfile]:
    override_path = path or DEFAULT_PATH
    if not override_path.exists():
        if path is not None:
            raise ProfileError(f"Profile file not found: {override_path}")
        return dict(base)
    try:
        data = json.loads(override_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring unreadable profile file %s: %s", override_path, exc)
        return dict(base)
    try:
        if not isinstance(data, dict):
            raise ProfileError(f"Profile file {override_path} must contain a JSON object")
        profiles = merge_profiles(base, data)
    except ProfileError as exc:
        # only an explicitly requested file is fatal
        if path is not None:
            raise
        logger.warning("Ignoring invalid profile file %s: %s", override_path, exc)
        return dict(base)
    logger.debug("Loaded %d profile override(s) from %s", len(data), override_path)
    return profiles


def save_overrides(
    overrides: Mapping[str, Any], base: Mapping[str, ToleranceProfile], path: Path | None = None
) -> dict[str, ToleranceProfile]:
    """Validate ``overrides`` against ``base`` and write them as the override file."""
    profiles = merge_profiles(base, overrides)
    override_path = path or DEFAULT_PATH
    override_path.write_text(
        json.dumps(overrides, ensure_ascii=False, indent=2, sort_keys=True, default=str),
        encoding="utf-8",
    )
    return profiles
