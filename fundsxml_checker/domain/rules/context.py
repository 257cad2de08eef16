"""Inputs shared by every rule function."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable

from ..aggregation import DocumentAggregates
from ..dates import as_date
from ..models import Asset, Fund, FundsDocument, Portfolio, ShareClass
from ..results import EntityRef, Finding
from ..tolerances import ToleranceProfile


@dataclass(frozen=True)
class EvaluationContext:
    document: FundsDocument
    aggregates: DocumentAggregates
    profile: ToleranceProfile
    as_of: datetime

    @property
    def today(self) -> date:
        return as_date(self.as_of)

    @property
    def content_date(self) -> date | None:
        return self.document.content_date


Rule = Callable[[EvaluationContext], Iterable[Finding]]


def fund_ref(fund: Fund) -> EntityRef:
    return EntityRef(kind="Fund", key=fund.key, fund=fund.key)


def share_class_ref(fund: Fund, share_class: ShareClass) -> EntityRef:
    return EntityRef(kind="ShareClass", key=share_class.key, fund=fund.key)


def portfolio_ref(fund_key: str, ordinal: int) -> EntityRef:
    return EntityRef(kind="Portfolio", key=str(ordinal), fund=fund_key)


def position_ref(fund_key: str, portfolio: int, position: int) -> EntityRef:
    return EntityRef(kind="Position", key=f"{portfolio}.{position}", fund=fund_key)


def asset_ref(asset: Asset) -> EntityRef:
    return EntityRef(kind="Asset", key=asset.key)


def portfolio_owner(fund: Fund, portfolio: Portfolio) -> str:
    if portfolio.share_class is None:
        return f"fund {fund.key}"
    return f"share class {portfolio.share_class}"
