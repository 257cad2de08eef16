"""FundsXML4 parser producing the read-only document model."""
from __future__ import annotations

import logging
from dataclasses import replace
from io import BytesIO
from itertools import count
from pathlib import Path
from typing import Iterator

from lxml import etree

from fundsxml_checker.domain.models import (
    Amount,
    Amounts,
    Asset,
    BondDetails,
    ControlData,
    Exposure,
    Fund,
    FundsDocument,
    FxRate,
    Identifiers,
    Portfolio,
    Position,
    ShareClass,
)
from fundsxml_checker.errors import DocumentParseError
from fundsxml_checker.infrastructure.parsing.utils import (
    clean_text,
    ensure_bytes,
    parse_date,
    parse_datetime,
    parse_decimal,
)

logger = logging.getLogger(__name__)

# Schema versions disagree on the master data container; both are read.
ASSET_SECTIONS = ("Assets", "AssetMasterData")

KNOWN_IDENTIFIERS = {
    "ISIN": "isin",
    "LEI": "lei",
    "SEDOL": "sedol",
    "WKN": "wkn",
    "Ticker": "ticker",
    "BIC": "bic",
}


def _local(element: etree._Element) -> str:
    return etree.QName(element).localname


def _elements(element: etree._Element | None) -> Iterator[etree._Element]:
    if element is None:
        return
    for child in element:
        if isinstance(child.tag, str):
            yield child


def _iter(element: etree._Element | None, *path: str) -> Iterator[etree._Element]:
    """Yield every element reached by following ``path`` by local name."""
    if element is None:
        return
    if not path:
        yield element
        return
    head, rest = path[0], path[1:]
    for child in _elements(element):
        if _local(child) == head:
            yield from _iter(child, *rest)


def _child(element: etree._Element | None, *path: str) -> etree._Element | None:
    return next(_iter(element, *path), None)


def _text(element: etree._Element | None, *path: str) -> str | None:
    node = _child(element, *path)
    if node is None:
        return None
    return clean_text(node.text or "")


def _amounts(element: etree._Element | None) -> Amounts:
    items = []
    for node in _iter(element, "Amount"):
        value = parse_decimal(node.text)
        if value is None:
            continue
        items.append(Amount(currency=clean_text(node.get("ccy")), value=value))
    return Amounts(tuple(items))


def _identifiers(element: etree._Element | None) -> Identifiers:
    known: dict[str, str] = {}
    others: list[tuple[str, str]] = []
    for child in _elements(element):
        name = _local(child)
        value = clean_text(child.text or "")
        attribute = KNOWN_IDENTIFIERS.get(name)
        if attribute is None:
            others.append((child.get("FreeType") or name, value))
        elif attribute not in known:
            known[attribute] = value
    return Identifiers(**known, others=tuple(others))


def _control_data(root: etree._Element) -> ControlData | None:
    node = _child(root, "ControlData")
    if node is None:
        return None
    supplier = _child(node, "DataSupplier")
    supplier_name = None
    if supplier is not None:
        supplier_name = _text(supplier, "Name") or _text(supplier, "Short") or clean_text(supplier.text or "")
    return ControlData(
        unique_document_id=_text(node, "UniqueDocumentID"),
        document_generated=parse_datetime(_text(node, "DocumentGenerated")),
        content_date=parse_date(_text(node, "ContentDate")),
        data_supplier=supplier_name,
        data_operation=_text(node, "DataOperation"),
        language=_text(node, "Language"),
    )


def _exposure(node: etree._Element) -> Exposure:
    value_node = _child(node, "Value")
    value = None
    if value_node is not None:
        amounts = _amounts(value_node)
        value = amounts.items[0].value if len(amounts) else parse_decimal(value_node.text)
    return Exposure(type=_text(node, "Type"), value=value)


def _position(node: etree._Element, ordinal: int) -> Position:
    fx_rates = tuple(
        FxRate(
            from_currency=clean_text(rate.get("fromCcy")),
            to_currency=clean_text(rate.get("toCcy")),
            rate=parse_decimal(rate.text),
            mul_div=clean_text(rate.get("mulDiv")),
        )
        for rate in _iter(node, "FXRates", "FXRate")
    )
    return Position(
        ordinal=ordinal,
        unique_id=_text(node, "UniqueID"),
        currency=_text(node, "Currency"),
        values=_amounts(_child(node, "TotalValue")),
        percentage=parse_decimal(_text(node, "TotalPercentage")),
        fx_rates=fx_rates,
        exposures=tuple(_exposure(exposure) for exposure in _iter(node, "Exposures", "Exposure")),
    )


def _portfolio(node: etree._Element, ordinal: int, share_class: str | None = None) -> Portfolio:
    positions = tuple(
        _position(position, index) for index, position in enumerate(_iter(node, "Positions", "Position"), start=1)
    )
    return Portfolio(
        ordinal=ordinal,
        nav_date=parse_date(_text(node, "NavDate")),
        currency=_text(node, "Currency"),
        positions=positions,
        share_class=share_class,
    )


def _share_class(node: etree._Element, ordinal: int, portfolio_ordinals: Iterator[int]) -> ShareClass:
    total = _child(node, "TotalAssetValues", "TotalAssetValue")
    price = _child(node, "Prices", "Price")
    shares = _text(total, "SharesOutstanding") if total is not None else None
    ratio = _text(total, "Ratio") if total is not None else None
    share_class = ShareClass(
        ordinal=ordinal,
        isin=_text(node, "Identifiers", "ISIN"),
        name=_text(node, "Names", "OfficialName"),
        currency=_text(node, "Currency"),
        nav_price=parse_decimal(_text(price, "NavPrice")),
        shares_outstanding=parse_decimal(shares if shares is not None else _text(node, "SharesOutstanding")),
        total_net_asset_value=_amounts(_child(total, "TotalNetAssetValue")),
        ratio=parse_decimal(ratio if ratio is not None else _text(node, "Ratio")),
    )
    portfolios = tuple(
        _portfolio(portfolio, next(portfolio_ordinals), share_class.key)
        for portfolio in _iter(node, "Portfolios", "Portfolio")
    )
    return replace(share_class, portfolios=portfolios)


def _fund(node: etree._Element, ordinal: int) -> Fund:
    total = _child(node, "FundDynamicData", "TotalAssetValues", "TotalAssetValue")
    portfolio_ordinals = count(1)
    portfolios = tuple(
        _portfolio(portfolio, next(portfolio_ordinals))
        for portfolio in _iter(node, "FundDynamicData", "Portfolios", "Portfolio")
    )
    class_nodes = list(_iter(node, "SingleFund", "ShareClasses", "ShareClass")) or list(
        _iter(node, "ShareClasses", "ShareClass")
    )
    share_classes = tuple(
        _share_class(class_node, index, portfolio_ordinals) for index, class_node in enumerate(class_nodes, start=1)
    )
    inception = _text(node, "FundStaticData", "InceptionDate")
    return Fund(
        ordinal=ordinal,
        name=_text(node, "Names", "OfficialName"),
        lei=_text(node, "Identifiers", "LEI"),
        currency=_text(node, "Currency"),
        inception_date=parse_date(inception if inception is not None else _text(node, "InceptionDate")),
        total_net_asset_value=_amounts(_child(total, "TotalNetAssetValue")),
        nav_date=parse_date(_text(total, "NavDate")),
        portfolios=portfolios,
        share_classes=share_classes,
    )


def _bond(node: etree._Element | None) -> BondDetails | None:
    if node is None:
        return None
    issuer = _child(node, "Issuer")
    issuer_name = None
    if issuer is not None:
        issuer_name = _text(issuer, "Name") if _child(issuer, "Name") is not None else clean_text(issuer.text or "")
    first_coupon = _text(node, "DateFirstCoupon")
    return BondDetails(
        issue_date=parse_date(_text(node, "IssueDate")),
        maturity_date=parse_date(_text(node, "MaturityDate")),
        first_coupon_date=parse_date(first_coupon if first_coupon is not None else _text(node, "FirstCouponDate")),
        interest_rate=parse_decimal(_text(node, "InterestRate")),
        issuer=issuer_name,
    )


def _asset(node: etree._Element) -> Asset:
    return Asset(
        unique_id=_text(node, "UniqueID"),
        asset_type_code=_text(node, "AssetType"),
        name=_text(node, "Name"),
        currency=_text(node, "Currency"),
        country=_text(node, "Country"),
        identifiers=_identifiers(_child(node, "Identifiers")),
        bond=_bond(_child(node, "AssetDetails", "Bond")),
    )


def parse_fundsxml(source: BytesIO | Path | bytes | str) -> FundsDocument:
    """Parse a FundsXML4 document.

    Raises :class:`DocumentParseError` for empty or non-well-formed input.
    Missing sections are not errors here; they surface as structural
    findings during evaluation.
    """
    data = ensure_bytes(source)
    if not data.strip():
        raise DocumentParseError("Document is empty")
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as exc:
        raise DocumentParseError(f"Document is not well-formed XML: {exc.msg}", exc.lineno, exc.offset) from exc

    funds_node = _child(root, "Funds")
    funds = tuple(_fund(node, index) for index, node in enumerate(_iter(funds_node, "Fund"), start=1))

    assets: list[Asset] = []
    sections: list[str] = []
    for child in _elements(root):
        name = _local(child)
        if name not in ASSET_SECTIONS:
            continue
        sections.append(name)
        assets.extend(_asset(node) for node in _iter(child, "Asset"))

    document = FundsDocument.build(
        root_tag=_local(root),
        control_data=_control_data(root),
        funds=funds,
        assets=assets,
        has_funds_section=funds_node is not None,
        asset_sections=sections,
    )
    logger.info(
        "Parsed %s document: %d fund(s), %d asset(s) from %s",
        document.root_tag,
        len(document.funds),
        len(document.assets),
        ", ".join(sections) or "no asset section",
    )
    if document.duplicate_asset_ids:
        logger.warning("Duplicate asset UniqueIDs: %s", ", ".join(document.duplicate_asset_ids))
    return document
