"""Asset master data checks, mostly bond date sequences."""
from __future__ import annotations

from typing import Iterator

from ..models import Asset, AssetType
from ..results import DOCUMENT, Category, EntityRef, Finding, Severity
from .context import EvaluationContext, asset_ref

ASSET_UNUSED = "ASSET_UNUSED"
ASSET_TYPE_UNKNOWN = "ASSET_TYPE_UNKNOWN"
ASSET_BOND_DATES = "ASSET_BOND_DATES"
ASSET_BOND_FIRST_COUPON = "ASSET_BOND_FIRST_COUPON"
ASSET_BOND_MATURED = "ASSET_BOND_MATURED"
ASSET_BOND_MATURITY_MISSING = "ASSET_BOND_MATURITY_MISSING"


def _bonds(ctx: EvaluationContext) -> list[Asset]:
    return [asset for asset in ctx.document.assets if asset.asset_type is AssetType.BOND]


def check_unused_assets(ctx: EvaluationContext) -> Iterator[Finding]:
    unused = ctx.aggregates.unused_assets
    for unique_id in unused:
        yield Finding(
            ASSET_UNUSED,
            Category.ASSET,
            Severity.WARNING,
            EntityRef(kind="Asset", key=unique_id),
            f"Asset {unique_id} is not referenced by any position",
            measured=unique_id,
        )
    if ctx.document.asset_index and not unused:
        yield Finding(ASSET_UNUSED, Category.ASSET, Severity.PASS, DOCUMENT, "Every asset is referenced by a position")


def check_asset_types(ctx: EvaluationContext) -> Iterator[Finding]:
    unknown = 0
    for asset in ctx.document.assets:
        if asset.asset_type is not None:
            continue
        unknown += 1
        if asset.asset_type_code in (None, ""):
            message = "AssetType is missing"
        else:
            message = f"AssetType {asset.asset_type_code} is not a known asset type"
        yield Finding(
            ASSET_TYPE_UNKNOWN,
            Category.ASSET,
            Severity.WARNING,
            asset_ref(asset),
            message,
            measured=asset.asset_type_code,
        )
    if ctx.document.assets and not unknown:
        yield Finding(ASSET_TYPE_UNKNOWN, Category.ASSET, Severity.PASS, DOCUMENT, "Every asset has a known AssetType")


def check_bond_dates(ctx: EvaluationContext) -> Iterator[Finding]:
    for asset in _bonds(ctx):
        bond = asset.bond
        if bond is None or bond.issue_date is None or bond.maturity_date is None:
            continue
        if bond.issue_date < bond.maturity_date:
            severity = Severity.PASS
            message = f"IssueDate {bond.issue_date} precedes MaturityDate {bond.maturity_date}"
        else:
            severity = Severity.ERROR
            message = f"IssueDate {bond.issue_date} is not before MaturityDate {bond.maturity_date}"
        yield Finding(
            ASSET_BOND_DATES,
            Category.ASSET,
            severity,
            asset_ref(asset),
            message,
            measured=bond.issue_date.isoformat(),
            expected=f"< {bond.maturity_date.isoformat()}",
        )


def check_first_coupon(ctx: EvaluationContext) -> Iterator[Finding]:
    for asset in _bonds(ctx):
        bond = asset.bond
        if bond is None or bond.issue_date is None or bond.first_coupon_date is None:
            continue
        if bond.first_coupon_date >= bond.issue_date:
            severity = Severity.PASS
            message = f"DateFirstCoupon {bond.first_coupon_date} is on or after IssueDate {bond.issue_date}"
        else:
            severity = Severity.ERROR
            message = f"DateFirstCoupon {bond.first_coupon_date} is before IssueDate {bond.issue_date}"
        yield Finding(
            ASSET_BOND_FIRST_COUPON,
            Category.ASSET,
            severity,
            asset_ref(asset),
            message,
            measured=bond.first_coupon_date.isoformat(),
            expected=f">= {bond.issue_date.isoformat()}",
        )


def check_matured_bonds(ctx: EvaluationContext) -> Iterator[Finding]:
    content_date = ctx.content_date
    if content_date is None:
        return
    checked = 0
    matured = 0
    for asset in _bonds(ctx):
        if asset.bond is None or asset.bond.maturity_date is None:
            continue
        checked += 1
        maturity = asset.bond.maturity_date
        if maturity >= content_date:
            continue
        matured += 1
        held = asset.unique_id in ctx.aggregates.referenced_ids
        suffix = " and is still held" if held else ""
        yield Finding(
            ASSET_BOND_MATURED,
            Category.ASSET,
            Severity.ERROR,
            asset_ref(asset),
            f"Bond matured on {maturity}, before content date {content_date}{suffix}",
            measured=maturity.isoformat(),
            expected=f">= {content_date.isoformat()}",
        )
    if checked and not matured:
        yield Finding(
            ASSET_BOND_MATURED,
            Category.ASSET,
            Severity.PASS,
            DOCUMENT,
            f"No matured bonds among {checked} dated bond(s)",
            measured=checked,
        )


def check_maturity_missing(ctx: EvaluationContext) -> Iterator[Finding]:
    bonds = _bonds(ctx)
    if not bonds:
        return
    missing = [asset.key for asset in bonds if asset.bond is None or asset.bond.maturity_date is None]
    if missing:
        yield Finding(
            ASSET_BOND_MATURITY_MISSING,
            Category.ASSET,
            Severity.WARNING,
            DOCUMENT,
            f"{len(missing)} of {len(bonds)} bond(s) have no MaturityDate: {', '.join(missing)}",
            measured=len(missing),
            expected="0",
        )
    else:
        yield Finding(
            ASSET_BOND_MATURITY_MISSING,
            Category.ASSET,
            Severity.PASS,
            DOCUMENT,
            f"All {len(bonds)} bond(s) carry a MaturityDate",
            measured=0,
        )


RULES = (
    check_unused_assets,
    check_asset_types,
    check_bond_dates,
    check_first_coupon,
    check_matured_bonds,
    check_maturity_missing,
)
