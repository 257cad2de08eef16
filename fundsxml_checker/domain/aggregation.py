"""Aggregation engine computing the derived figures the rules rely on.

pandas handles grouping and distinct-value work; monetary arithmetic
stays in ``Decimal`` throughout.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

import pandas as pd

from .dates import LADDER_BUCKETS, MaturityBucket, classify_maturity
from .models import Asset, AssetType, Fund, FundsDocument, Portfolio, Position
from .tolerances import HUNDRED

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
COVERED_IDENTIFIERS = ("ISIN", "LEI", "SEDOL", "WKN", "Ticker")
PRIMARY_IDENTIFIERS = frozenset({"ISIN", "LEI"})


def percentage_of_total(part: int | Decimal, total: int | Decimal) -> Decimal | None:
    if total == 0:
        return None
    return Decimal(part) * HUNDRED / Decimal(total)


@dataclass(frozen=True)
class GroupShare:
    key: str
    count: int
    share_pct: Decimal


def distribution(keys: Iterable[str | None]) -> tuple[GroupShare, ...]:
    """Count per key and its share of all keyed items, in first-seen order."""
    series = pd.Series(list(keys), dtype="object").dropna()
    total = len(series)
    if total == 0:
        return ()
    counts = series.groupby(series, sort=False).size()
    return tuple(
        GroupShare(key=str(key), count=int(count), share_pct=percentage_of_total(int(count), total))
        for key, count in counts.items()
    )


def grouped_sum(keys: Iterable[str | None], values: Iterable[Decimal | None]) -> dict[str, Decimal]:
    """Sum values per key in first-seen order; rows lacking a key or a value are skipped."""
    frame = pd.DataFrame({"key": list(keys), "value": list(values)}, dtype="object").dropna()
    if frame.empty:
        return {}
    sums = frame.groupby("key", sort=False)["value"].agg(lambda column: sum(column, ZERO))
    return {str(key): value for key, value in sums.items()}


def distinct(values: Iterable[str | None]) -> tuple[str, ...]:
    series = pd.Series(list(values), dtype="object").dropna()
    return tuple(str(value) for value in pd.unique(series))


@dataclass(frozen=True)
class Holding:
    fund_key: str
    portfolio: int
    position: Position
    percentage: Decimal


def rank_holdings(holdings: Sequence[Holding]) -> tuple[Holding, ...]:
    """Order by percentage descending; ties keep document order."""
    return tuple(sorted(holdings, key=lambda h: h.percentage, reverse=True))


@dataclass(frozen=True)
class PortfolioAggregates:
    fund_key: str
    ordinal: int
    share_class: str | None
    nav_date: date | None
    position_count: int
    value_sum: Decimal
    missing_value_positions: tuple[int, ...]
    percentage_sum: Decimal | None
    missing_percentage_positions: tuple[int, ...] = ()


@dataclass(frozen=True)
class FundAggregates:
    fund_ordinal: int
    fund_key: str
    currency: str | None
    total_net_asset_value: Decimal | None
    share_class_count: int
    share_class_tna_sum: Decimal
    share_classes_missing_tna: tuple[str, ...]
    average_share_class_tna: Decimal | None
    portfolios: tuple[PortfolioAggregates, ...]
    value_by_currency: Mapping[str, Decimal]
    value_by_asset_type: Mapping[str, Decimal]
    exposure_by_type: Mapping[str, Decimal]
    asset_type_distribution: tuple[GroupShare, ...]
    top_holdings: tuple[Holding, ...]
    concentration: Mapping[int, Decimal]
    currencies: tuple[str, ...]
    asset_types: tuple[str, ...]


@dataclass(frozen=True)
class IdentifierCoverage:
    identifier: str
    present: int
    total: int
    coverage_pct: Decimal | None

    @property
    def primary(self) -> bool:
        return self.identifier in PRIMARY_IDENTIFIERS


@dataclass(frozen=True)
class MaturityLadder:
    content_date: date
    buckets: Mapping[MaturityBucket, tuple[str, ...]]
    missing: tuple[str, ...] = ()

    @property
    def dated_count(self) -> int:
        return sum(len(ids) for ids in self.buckets.values())

    def count(self, bucket: MaturityBucket) -> int:
        if bucket is MaturityBucket.NO_DATA:
            return len(self.missing)
        return len(self.buckets.get(bucket, ()))

    def share_pct(self, bucket: MaturityBucket) -> Decimal | None:
        """Share of dated bonds; bonds without a maturity are not in the denominator."""
        if bucket is MaturityBucket.NO_DATA:
            return None
        return percentage_of_total(self.count(bucket), self.dated_count)


@dataclass(frozen=True)
class OrphanedPosition:
    fund_key: str
    portfolio: int
    position: int
    unique_id: str | None


@dataclass(frozen=True)
class DocumentAggregates:
    funds: tuple[FundAggregates, ...] = ()
    asset_type_distribution: tuple[GroupShare, ...] = ()
    identifier_coverage: tuple[IdentifierCoverage, ...] = ()
    maturity_ladder: MaturityLadder | None = None
    orphaned_positions: tuple[OrphanedPosition, ...] = ()
    unused_assets: tuple[str, ...] = ()
    referenced_ids: frozenset[str] = field(default_factory=frozenset)

    def fund(self, ordinal: int) -> FundAggregates:
        for item in self.funds:
            if item.fund_ordinal == ordinal:
                return item
        raise KeyError(ordinal)


def aggregate_portfolio(fund: Fund, portfolio: Portfolio) -> PortfolioAggregates:
    value_sum = ZERO
    missing: list[int] = []
    for position in portfolio.positions:
        value = position.values.get(fund.currency)
        if value is None:
            missing.append(position.ordinal)
            continue
        value_sum += value
    percentages = [p.percentage for p in portfolio.positions if p.percentage is not None]
    return PortfolioAggregates(
        fund_key=fund.key,
        ordinal=portfolio.ordinal,
        share_class=portfolio.share_class,
        nav_date=portfolio.nav_date,
        position_count=len(portfolio.positions),
        value_sum=value_sum,
        missing_value_positions=tuple(missing),
        percentage_sum=sum(percentages, ZERO) if percentages else None,
        missing_percentage_positions=tuple(p.ordinal for p in portfolio.positions if p.percentage is None),
    )


def aggregate_fund(
    fund: Fund,
    document: FundsDocument,
    top_holdings: int = 15,
    concentration_sizes: Sequence[int] = (5, 10),
) -> FundAggregates:
    currency = fund.currency
    class_tna = [(share_class, share_class.total_net_asset_value.get(currency)) for share_class in fund.share_classes]
    known = [value for _, value in class_tna if value is not None]
    tna_sum = sum(known, ZERO)

    positions: list[Position] = []
    asset_types: list[str | None] = []
    fund_values: list[Decimal | None] = []
    holdings: list[Holding] = []
    for portfolio in fund.iter_portfolios():
        for position in portfolio.positions:
            asset = document.resolve(position.unique_id)
            positions.append(position)
            asset_types.append(asset.asset_type_code if asset is not None else None)
            fund_values.append(position.values.get(currency))
            if position.percentage is not None:
                holdings.append(Holding(fund.key, portfolio.ordinal, position, position.percentage))

    exposures = [exposure for position in positions for exposure in position.exposures]
    ranked = rank_holdings(holdings)
    concentration = (
        {size: sum((h.percentage for h in ranked[:size]), ZERO) for size in concentration_sizes} if ranked else {}
    )

    return FundAggregates(
        fund_ordinal=fund.ordinal,
        fund_key=fund.key,
        currency=currency,
        total_net_asset_value=fund.fund_tna,
        share_class_count=len(fund.share_classes),
        share_class_tna_sum=tna_sum,
        share_classes_missing_tna=tuple(share_class.key for share_class, value in class_tna if value is None),
        average_share_class_tna=tna_sum / len(known) if known else None,
        portfolios=tuple(aggregate_portfolio(fund, portfolio) for portfolio in fund.iter_portfolios()),
        value_by_currency=grouped_sum([p.currency for p in positions], fund_values),
        value_by_asset_type=grouped_sum(asset_types, fund_values),
        exposure_by_type=grouped_sum([e.type for e in exposures], [e.value for e in exposures]),
        asset_type_distribution=distribution(asset_types),
        top_holdings=ranked[:top_holdings],
        concentration=concentration,
        currencies=distinct(p.currency for p in positions),
        asset_types=distinct(asset_types),
    )


def identifier_coverage(assets: Sequence[Asset]) -> tuple[IdentifierCoverage, ...]:
    total = len(assets)
    coverage = []
    for name in COVERED_IDENTIFIERS:
        present = sum(1 for asset in assets if asset.identifiers.get(name))
        coverage.append(IdentifierCoverage(name, present, total, percentage_of_total(present, total)))
    return tuple(coverage)


def maturity_ladder(assets: Iterable[Asset], content_date: date) -> MaturityLadder:
    buckets: dict[MaturityBucket, list[str]] = {bucket: [] for bucket in LADDER_BUCKETS}
    missing: list[str] = []
    for asset in assets:
        if asset.asset_type is not AssetType.BOND:
            continue
        maturity = asset.bond.maturity_date if asset.bond is not None else None
        bucket = classify_maturity(content_date, maturity)
        if bucket is MaturityBucket.NO_DATA:
            missing.append(asset.key)
        else:
            buckets[bucket].append(asset.key)
    return MaturityLadder(
        content_date=content_date,
        buckets={bucket: tuple(ids) for bucket, ids in buckets.items()},
        missing=tuple(missing),
    )


def find_orphaned_positions(document: FundsDocument) -> tuple[OrphanedPosition, ...]:
    return tuple(
        OrphanedPosition(fund.key, portfolio.ordinal, position.ordinal, position.unique_id)
        for fund, portfolio, position in document.iter_positions()
        if document.resolve(position.unique_id) is None
    )


def find_unused_assets(document: FundsDocument, referenced: frozenset[str]) -> tuple[str, ...]:
    return tuple(unique_id for unique_id in document.asset_index if unique_id not in referenced)


def aggregate_document(
    document: FundsDocument,
    top_holdings: int = 15,
    concentration_sizes: Sequence[int] = (5, 10),
) -> DocumentAggregates:
    referenced = frozenset(
        position.unique_id for _, _, position in document.iter_positions() if position.unique_id is not None
    )
    content_date = document.content_date
    aggregates = DocumentAggregates(
        funds=tuple(aggregate_fund(fund, document, top_holdings, concentration_sizes) for fund in document.funds),
        asset_type_distribution=distribution(asset.asset_type_code for asset in document.assets),
        identifier_coverage=identifier_coverage(document.assets),
        maturity_ladder=maturity_ladder(document.assets, content_date) if content_date is not None else None,
        orphaned_positions=find_orphaned_positions(document),
        unused_assets=find_unused_assets(document, referenced),
        referenced_ids=referenced,
    )
    logger.debug(
        "Aggregated %d fund(s), %d asset(s): %d orphaned position(s), %d unused asset(s)",
        len(aggregates.funds),
        len(document.assets),
        len(aggregates.orphaned_positions),
        len(aggregates.unused_assets),
    )
    return aggregates
