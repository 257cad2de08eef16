"""Structural checks: root element, required sections, duplicate master data."""
from __future__ import annotations

from typing import Iterator

from ..results import DOCUMENT, Category, EntityRef, Finding, Severity
from .context import EvaluationContext

ROOT_TAG = "FundsXML4"

STRUCT_ROOT = "STRUCT_ROOT"
STRUCT_CONTROL_DATA = "STRUCT_CONTROL_DATA"
STRUCT_CONTROL_FIELDS = "STRUCT_CONTROL_FIELDS"
STRUCT_FUNDS = "STRUCT_FUNDS"
STRUCT_ASSETS = "STRUCT_ASSETS"
STRUCT_DUPLICATE_ASSET = "STRUCT_DUPLICATE_ASSET"

# attribute on ControlData -> element name in the document
REQUIRED_CONTROL_FIELDS = (
    ("unique_document_id", "UniqueDocumentID"),
    ("document_generated", "DocumentGenerated"),
    ("content_date", "ContentDate"),
    ("data_supplier", "DataSupplier"),
)

CONTROL_DATA = EntityRef(kind="ControlData")


def check_root(ctx: EvaluationContext) -> Iterator[Finding]:
    root = ctx.document.root_tag
    if root == ROOT_TAG:
        yield Finding(STRUCT_ROOT, Category.STRUCTURAL, Severity.PASS, DOCUMENT, f"Root element is {ROOT_TAG}")
    else:
        yield Finding(
            STRUCT_ROOT,
            Category.STRUCTURAL,
            Severity.ERROR,
            DOCUMENT,
            f"Root element is {root}, not {ROOT_TAG}",
            measured=root,
            expected=ROOT_TAG,
        )


def check_control_data(ctx: EvaluationContext) -> Iterator[Finding]:
    if ctx.document.control_data is None:
        yield Finding(STRUCT_CONTROL_DATA, Category.STRUCTURAL, Severity.ERROR, CONTROL_DATA, "ControlData section is missing")
    else:
        yield Finding(STRUCT_CONTROL_DATA, Category.STRUCTURAL, Severity.PASS, CONTROL_DATA, "ControlData section present")


def check_control_fields(ctx: EvaluationContext) -> Iterator[Finding]:
    control_data = ctx.document.control_data
    if control_data is None:
        return
    missing = [element for attribute, element in REQUIRED_CONTROL_FIELDS if getattr(control_data, attribute) in (None, "")]
    for element in missing:
        yield Finding(
            STRUCT_CONTROL_FIELDS,
            Category.STRUCTURAL,
            Severity.WARNING,
            CONTROL_DATA,
            f"ControlData/{element} is missing or unreadable",
            measured=element,
        )
    if not missing:
        yield Finding(
            STRUCT_CONTROL_FIELDS,
            Category.STRUCTURAL,
            Severity.PASS,
            CONTROL_DATA,
            "All required ControlData fields present",
        )


def check_funds_section(ctx: EvaluationContext) -> Iterator[Finding]:
    document = ctx.document
    if not document.has_funds_section:
        yield Finding(STRUCT_FUNDS, Category.STRUCTURAL, Severity.ERROR, DOCUMENT, "Funds section is missing")
    elif not document.funds:
        yield Finding(STRUCT_FUNDS, Category.STRUCTURAL, Severity.ERROR, DOCUMENT, "Funds section contains no Fund", measured=0)
    else:
        yield Finding(
            STRUCT_FUNDS,
            Category.STRUCTURAL,
            Severity.PASS,
            DOCUMENT,
            f"{len(document.funds)} fund(s) present",
            measured=len(document.funds),
        )


def check_asset_section(ctx: EvaluationContext) -> Iterator[Finding]:
    document = ctx.document
    if document.asset_sections:
        yield Finding(
            STRUCT_ASSETS,
            Category.STRUCTURAL,
            Severity.PASS,
            DOCUMENT,
            f"{len(document.assets)} asset(s) in {', '.join(document.asset_sections)}",
            measured=len(document.assets),
        )
        return
    # without master data no position can be resolved
    severity = Severity.ERROR if ctx.aggregates.referenced_ids else Severity.WARNING
    yield Finding(STRUCT_ASSETS, Category.STRUCTURAL, severity, DOCUMENT, "Asset master data section is missing")


def check_duplicate_assets(ctx: EvaluationContext) -> Iterator[Finding]:
    document = ctx.document
    if not document.assets:
        return
    for unique_id in document.duplicate_asset_ids:
        yield Finding(
            STRUCT_DUPLICATE_ASSET,
            Category.STRUCTURAL,
            Severity.ERROR,
            EntityRef(kind="Asset", key=unique_id),
            f"UniqueID {unique_id} is defined more than once; the first definition is used",
            measured=unique_id,
        )
    if not document.duplicate_asset_ids:
        yield Finding(STRUCT_DUPLICATE_ASSET, Category.STRUCTURAL, Severity.PASS, DOCUMENT, "Asset UniqueIDs are unique")


RULES = (
    check_root,
    check_control_data,
    check_control_fields,
    check_funds_section,
    check_asset_section,
    check_duplicate_assets,
)
