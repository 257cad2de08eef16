"""Temporal checks against the content date and the injected evaluation time."""
from __future__ import annotations

from typing import Iterator

from ..dates import days_between
from ..results import Category, EntityRef, Finding, Severity
from ..tolerances import FRESHNESS_SEVERITY
from .context import EvaluationContext, fund_ref, portfolio_owner, portfolio_ref

TEMPORAL_CONTENT_DATE_FUTURE = "TEMPORAL_CONTENT_DATE_FUTURE"
TEMPORAL_FRESHNESS = "TEMPORAL_FRESHNESS"
TEMPORAL_PROCESSING_DELAY = "TEMPORAL_PROCESSING_DELAY"
TEMPORAL_NAV_DATE = "TEMPORAL_NAV_DATE"
TEMPORAL_INCEPTION_DATE = "TEMPORAL_INCEPTION_DATE"

CONTROL_DATA = EntityRef(kind="ControlData")


def check_content_date_not_future(ctx: EvaluationContext) -> Iterator[Finding]:
    content_date = ctx.content_date
    if content_date is None:
        return
    if content_date > ctx.today:
        yield Finding(
            TEMPORAL_CONTENT_DATE_FUTURE,
            Category.TEMPORAL,
            Severity.ERROR,
            CONTROL_DATA,
            f"ContentDate {content_date} lies in the future (today is {ctx.today})",
            measured=content_date.isoformat(),
            expected=f"<= {ctx.today.isoformat()}",
        )
    else:
        yield Finding(
            TEMPORAL_CONTENT_DATE_FUTURE,
            Category.TEMPORAL,
            Severity.PASS,
            CONTROL_DATA,
            f"ContentDate {content_date} is not in the future",
            measured=content_date.isoformat(),
        )


def check_freshness(ctx: EvaluationContext) -> Iterator[Finding]:
    content_date = ctx.content_date
    if content_date is None:
        return
    bands = ctx.profile.freshness
    age = days_between(content_date, ctx.today)
    label = bands.label(age)
    yield Finding(
        TEMPORAL_FRESHNESS,
        Category.TEMPORAL,
        FRESHNESS_SEVERITY[label],
        CONTROL_DATA,
        f"Data is {age} day(s) old: {label.value}",
        measured=age,
        expected=f"fresh < {bands.fresh_below}, recent < {bands.recent_below}, aging < {bands.aging_below} days",
    )


def check_processing_delay(ctx: EvaluationContext) -> Iterator[Finding]:
    control_data = ctx.document.control_data
    if control_data is None or control_data.content_date is None or control_data.document_generated is None:
        return
    band = ctx.profile.processing_delay
    delay = days_between(control_data.content_date, control_data.document_generated)
    yield Finding(
        TEMPORAL_PROCESSING_DELAY,
        Category.TEMPORAL,
        band.classify(delay),
        CONTROL_DATA,
        f"Document generated {delay} day(s) after its content date",
        measured=delay,
        expected=band.describe(" days"),
    )


def check_nav_dates(ctx: EvaluationContext) -> Iterator[Finding]:
    content_date = ctx.content_date
    for fund in ctx.document.funds:
        for portfolio in fund.iter_portfolios():
            ref = portfolio_ref(fund.key, portfolio.ordinal)
            owner = portfolio_owner(fund, portfolio)
            if portfolio.nav_date is None:
                yield Finding(
                    TEMPORAL_NAV_DATE,
                    Category.TEMPORAL,
                    Severity.WARNING,
                    ref,
                    f"Portfolio of {owner} has no NavDate",
                )
            elif content_date is not None and portfolio.nav_date != content_date:
                yield Finding(
                    TEMPORAL_NAV_DATE,
                    Category.TEMPORAL,
                    Severity.WARNING,
                    ref,
                    f"Portfolio NavDate {portfolio.nav_date} of {owner} differs from ContentDate {content_date}",
                    measured=portfolio.nav_date.isoformat(),
                    expected=content_date.isoformat(),
                )
            else:
                yield Finding(
                    TEMPORAL_NAV_DATE,
                    Category.TEMPORAL,
                    Severity.PASS,
                    ref,
                    f"Portfolio NavDate {portfolio.nav_date} of {owner}",
                    measured=portfolio.nav_date.isoformat(),
                )


def check_inception_date(ctx: EvaluationContext) -> Iterator[Finding]:
    content_date = ctx.content_date
    if content_date is None:
        return
    for fund in ctx.document.funds:
        if fund.inception_date is None:
            continue
        if fund.inception_date > content_date:
            severity = Severity.ERROR
            message = f"Inception date {fund.inception_date} is after ContentDate {content_date}"
        else:
            severity = Severity.PASS
            message = f"Inception date {fund.inception_date}"
        yield Finding(
            TEMPORAL_INCEPTION_DATE,
            Category.TEMPORAL,
            severity,
            fund_ref(fund),
            message,
            measured=fund.inception_date.isoformat(),
            expected=f"<= {content_date.isoformat()}",
        )


RULES = (
    check_content_date_not_future,
    check_freshness,
    check_processing_delay,
    check_nav_dates,
    check_inception_date,
)
