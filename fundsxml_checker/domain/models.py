"""Domain models for the FundsXML4 fund / asset / position graph.

These dataclasses are read-only snapshots produced by the parser. An optional
element that is absent is ``None``; an element that is present but empty is
kept as ``""`` so completeness checks can tell the two apart.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Iterator, Mapping


class AssetType(str, Enum):
    EQUITY = "Equity"
    BOND = "Bond"
    SHARE_CLASS = "ShareClass"
    WARRANT = "Warrant"
    CERTIFICATE = "Certificate"
    OPTION = "Option"
    FUTURE = "Future"
    FX_FORWARD = "FXForward"
    SWAP = "Swap"
    REPO = "Repo"
    FIXED_TIME_DEPOSIT = "FixedTimeDeposit"
    CALL_MONEY = "CallMoney"
    ACCOUNT = "Account"
    FEE = "Fee"
    REAL_ESTATE = "RealEstate"
    REIT = "REIT"
    LOAN = "Loan"
    RIGHT = "Right"
    COMMODITY = "Commodity"
    PRIVATE_EQUITY = "PrivateEquity"
    COMMERCIAL_PAPER = "CommercialPaper"
    INDEX = "Index"
    CRYPTO = "Crypto"

    @classmethod
    def resolve(cls, raw: str | None) -> AssetType | None:
        """Map an AssetType code ("BO") or name ("Bond") to the enumeration."""
        if raw is None:
            return None
        value = raw.strip()
        if not value:
            return None
        by_code = ASSET_TYPE_CODES.get(value.upper())
        if by_code is not None:
            return by_code
        lowered = value.lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


# Two-letter codes used by FundsXML4 asset master data.
ASSET_TYPE_CODES: dict[str, AssetType] = {
    "EQ": AssetType.EQUITY,
    "BO": AssetType.BOND,
    "SC": AssetType.SHARE_CLASS,
    "WA": AssetType.WARRANT,
    "CE": AssetType.CERTIFICATE,
    "OP": AssetType.OPTION,
    "FU": AssetType.FUTURE,
    "FX": AssetType.FX_FORWARD,
    "SW": AssetType.SWAP,
    "RP": AssetType.REPO,
    "FT": AssetType.FIXED_TIME_DEPOSIT,
    "CM": AssetType.CALL_MONEY,
    "AC": AssetType.ACCOUNT,
    "FE": AssetType.FEE,
    "RE": AssetType.REAL_ESTATE,
    "RT": AssetType.REIT,
    "LO": AssetType.LOAN,
    "RI": AssetType.RIGHT,
    "CO": AssetType.COMMODITY,
    "PE": AssetType.PRIVATE_EQUITY,
    "CP": AssetType.COMMERCIAL_PAPER,
    "IX": AssetType.INDEX,
    "CR": AssetType.CRYPTO,
}


@dataclass(frozen=True)
class Amount:
    currency: str | None
    value: Decimal


@dataclass(frozen=True)
class Amounts:
    """Currency-tagged representations of one monetary figure."""

    items: tuple[Amount, ...] = ()

    def __iter__(self) -> Iterator[Amount]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def get(self, currency: str | None) -> Decimal | None:
        """Return the amount tagged with ``currency``; never sums across currencies."""
        if currency is None:
            return None
        for item in self.items:
            if item.currency == currency:
                return item.value
        return None

    def currencies(self) -> tuple[str, ...]:
        return tuple(item.currency for item in self.items if item.currency is not None)

    def has_mixed_signs(self) -> bool:
        positive = any(item.value > 0 for item in self.items)
        negative = any(item.value < 0 for item in self.items)
        return positive and negative


@dataclass(frozen=True)
class Identifiers:
    isin: str | None = None
    lei: str | None = None
    sedol: str | None = None
    wkn: str | None = None
    ticker: str | None = None
    bic: str | None = None
    others: tuple[tuple[str, str], ...] = ()

    def get(self, name: str) -> str | None:
        key = name.lower()
        if key in {"isin", "lei", "sedol", "wkn", "ticker", "bic"}:
            return getattr(self, key)
        for tag, value in self.others:
            if tag.lower() == key:
                return value
        return None


@dataclass(frozen=True)
class ControlData:
    unique_document_id: str | None = None
    document_generated: datetime | None = None
    content_date: date | None = None
    data_supplier: str | None = None
    data_operation: str | None = None
    language: str | None = None


@dataclass(frozen=True)
class FxRate:
    from_currency: str | None
    to_currency: str | None
    rate: Decimal | None
    mul_div: str | None = None


@dataclass(frozen=True)
class Exposure:
    type: str | None
    value: Decimal | None


@dataclass(frozen=True)
class Position:
    ordinal: int
    unique_id: str | None
    currency: str | None = None
    values: Amounts = field(default_factory=Amounts)
    percentage: Decimal | None = None
    fx_rates: tuple[FxRate, ...] = ()
    exposures: tuple[Exposure, ...] = ()


@dataclass(frozen=True)
class Portfolio:
    ordinal: int
    nav_date: date | None = None
    currency: str | None = None
    positions: tuple[Position, ...] = ()
    share_class: str | None = None


@dataclass(frozen=True)
class ShareClass:
    ordinal: int
    isin: str | None = None
    name: str | None = None
    currency: str | None = None
    nav_price: Decimal | None = None
    shares_outstanding: Decimal | None = None
    total_net_asset_value: Amounts = field(default_factory=Amounts)
    ratio: Decimal | None = None
    portfolios: tuple[Portfolio, ...] = ()

    @property
    def key(self) -> str:
        return self.isin or self.name or f"ShareClass#{self.ordinal}"


@dataclass(frozen=True)
class Fund:
    ordinal: int
    name: str | None = None
    lei: str | None = None
    currency: str | None = None
    inception_date: date | None = None
    total_net_asset_value: Amounts = field(default_factory=Amounts)
    nav_date: date | None = None
    portfolios: tuple[Portfolio, ...] = ()
    share_classes: tuple[ShareClass, ...] = ()

    @property
    def key(self) -> str:
        return self.lei or self.name or f"Fund#{self.ordinal}"

    @property
    def fund_tna(self) -> Decimal | None:
        return self.total_net_asset_value.get(self.currency)

    def iter_portfolios(self) -> Iterator[Portfolio]:
        yield from self.portfolios
        for share_class in self.share_classes:
            yield from share_class.portfolios


@dataclass(frozen=True)
class BondDetails:
    issue_date: date | None = None
    maturity_date: date | None = None
    first_coupon_date: date | None = None
    interest_rate: Decimal | None = None
    issuer: str | None = None


@dataclass(frozen=True)
class Asset:
    unique_id: str | None
    asset_type_code: str | None = None
    name: str | None = None
    currency: str | None = None
    country: str | None = None
    identifiers: Identifiers = field(default_factory=Identifiers)
    bond: BondDetails | None = None

    @property
    def asset_type(self) -> AssetType | None:
        return AssetType.resolve(self.asset_type_code)

    @property
    def key(self) -> str:
        return self.unique_id or self.name or "<unidentified asset>"


def build_asset_index(assets: Iterable[Asset]) -> tuple[dict[str, Asset], tuple[str, ...]]:
    """Index assets by UniqueID; the first occurrence of a duplicate wins."""
    index: dict[str, Asset] = {}
    duplicates: list[str] = []
    for asset in assets:
        if asset.unique_id is None:
            continue
        if asset.unique_id in index:
            if asset.unique_id not in duplicates:
                duplicates.append(asset.unique_id)
            continue
        index[asset.unique_id] = asset
    return index, tuple(duplicates)


@dataclass(frozen=True)
class FundsDocument:
    root_tag: str
    control_data: ControlData | None = None
    funds: tuple[Fund, ...] = ()
    assets: tuple[Asset, ...] = ()
    has_funds_section: bool = False
    asset_sections: tuple[str, ...] = ()
    asset_index: Mapping[str, Asset] = field(default_factory=dict, compare=False, hash=False)
    duplicate_asset_ids: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        root_tag: str = "FundsXML4",
        control_data: ControlData | None = None,
        funds: Iterable[Fund] = (),
        assets: Iterable[Asset] = (),
        has_funds_section: bool | None = None,
        asset_sections: Iterable[str] | None = None,
    ) -> FundsDocument:
        funds = tuple(funds)
        assets = tuple(assets)
        index, duplicates = build_asset_index(assets)
        if has_funds_section is None:
            has_funds_section = bool(funds)
        if asset_sections is None:
            asset_sections = ("AssetMasterData",) if assets else ()
        return cls(
            root_tag=root_tag,
            control_data=control_data,
            funds=funds,
            assets=assets,
            has_funds_section=has_funds_section,
            asset_sections=tuple(asset_sections),
            asset_index=index,
            duplicate_asset_ids=duplicates,
        )

    @property
    def content_date(self) -> date | None:
        return self.control_data.content_date if self.control_data else None

    def resolve(self, unique_id: str | None) -> Asset | None:
        if unique_id is None:
            return None
        return self.asset_index.get(unique_id)

    def iter_positions(self) -> Iterator[tuple[Fund, Portfolio, Position]]:
        for fund in self.funds:
            for portfolio in fund.iter_portfolios():
                for position in portfolio.positions:
                    yield fund, portfolio, position
