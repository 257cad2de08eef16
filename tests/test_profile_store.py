from decimal import Decimal
from pathlib import Path
import json

import pytest

from fundsxml_checker.config import BUILTIN_PROFILES, SETTINGS
from fundsxml_checker.errors import ProfileError
from fundsxml_checker.infrastructure.storage import profile_store
from fundsxml_checker.infrastructure.storage.profile_store import load_profiles, merge_profiles, save_overrides


def test_patch_existing_profile():
    profiles = merge_profiles(BUILTIN_PROFILES, {"nav_reconciliation": {"share_class_price": {"pass_within": "0.5"}}})

    band = profiles["nav_reconciliation"].share_class_price
    assert band.pass_within == Decimal("0.5")
    assert band.warn_within == Decimal("5")
    assert BUILTIN_PROFILES["nav_reconciliation"].share_class_price.pass_within == Decimal("1")


def test_new_profile_extends_base():
    profiles = merge_profiles(
        BUILTIN_PROFILES,
        {
            "strict": {
                "base": "data_quality",
                "percentage_sum": {"pass_within": "0.1"},
                "fund_nav_reconciliation": {"relative_pct": {"pass_within": "0.001", "warn_within": "0.01"}},
                "freshness": {"fresh_below": 2},
            }
        },
    )

    strict = profiles["strict"]
    assert strict.name == "strict"
    assert strict.percentage_sum.pass_within == Decimal("0.1")
    assert strict.percentage_sum.inclusive
    assert strict.fund_nav_reconciliation.relative_pct.warn_within == Decimal("0.01")
    assert strict.freshness.fresh_below == 2
    assert profiles["data_quality"] is BUILTIN_PROFILES["data_quality"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"data_quality": {"no_such_band": {}}},
        {"data_quality": {"percentage_sum": {"pass_within": "abc"}}},
        {"custom": {"base": "missing"}},
        {"data_quality": "loose"},
    ],
)
def test_invalid_overrides(overrides):
    with pytest.raises(ProfileError):
        merge_profiles(BUILTIN_PROFILES, overrides)


def test_save_and_load_overrides(tmp_path: Path):
    path = tmp_path / "tolerance_profiles.json"
    overrides = {"data_quality": {"processing_delay": {"pass_within": "3"}}}

    merged = save_overrides(overrides, BUILTIN_PROFILES, path=path)
    assert merged["data_quality"].processing_delay.pass_within == Decimal("3")
    assert json.loads(path.read_text()) == overrides

    loaded = load_profiles(BUILTIN_PROFILES, path=path)
    assert loaded["data_quality"].processing_delay.pass_within == Decimal("3")


def test_missing_override_file(tmp_path: Path):
    with pytest.raises(ProfileError):
        load_profiles(BUILTIN_PROFILES, path=tmp_path / "absent.json")


def test_unreadable_override_file_falls_back(tmp_path: Path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level("WARNING"):
        profiles = load_profiles(BUILTIN_PROFILES, path=path)

    assert profiles == BUILTIN_PROFILES
    assert "Ignoring unreadable profile file" in caplog.text


def test_invalid_default_file_falls_back(tmp_path: Path, monkeypatch, caplog):
    path = tmp_path / "tolerance_profiles.json"
    path.write_text(json.dumps({"data_quality": "loose"}), encoding="utf-8")
    monkeypatch.setattr(profile_store, "DEFAULT_PATH", path)

    with caplog.at_level("WARNING"):
        profiles = load_profiles(BUILTIN_PROFILES)

    assert profiles == BUILTIN_PROFILES
    assert "Ignoring invalid profile file" in caplog.text
    with pytest.raises(ProfileError):
        load_profiles(BUILTIN_PROFILES, path=path)


def test_default_file_that_is_not_an_object_falls_back(tmp_path: Path, monkeypatch):
    path = tmp_path / "tolerance_profiles.json"
    path.write_text("[1, 2]", encoding="utf-8")
    monkeypatch.setattr(profile_store, "DEFAULT_PATH", path)

    assert load_profiles(BUILTIN_PROFILES) == BUILTIN_PROFILES


def test_settings_profile_lookup():
    assert SETTINGS.profile().name == "data_quality"
    assert SETTINGS.profile("nav_reconciliation").fund_nav_reconciliation.relative_pct is not None
    with pytest.raises(ProfileError):
        SETTINGS.profile("unknown")
