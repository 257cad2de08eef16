from datetime import date
from decimal import Decimal

from fundsxml_checker.domain.aggregation import (
    GroupShare,
    Holding,
    aggregate_document,
    aggregate_fund,
    distinct,
    distribution,
    grouped_sum,
    identifier_coverage,
    maturity_ladder,
    percentage_of_total,
    rank_holdings,
)
from fundsxml_checker.domain.dates import MaturityBucket
from fundsxml_checker.domain.models import (
    Amount,
    Amounts,
    Asset,
    BondDetails,
    Fund,
    FundsDocument,
    Identifiers,
    Portfolio,
    Position,
    ShareClass,
)


def make_amounts(**values: str) -> Amounts:
    return Amounts(tuple(Amount(ccy, Decimal(value)) for ccy, value in values.items()))


def make_position(ordinal: int, unique_id: str, percentage: str | None = None, **values: str) -> Position:
    return Position(
        ordinal=ordinal,
        unique_id=unique_id,
        currency="EUR",
        values=make_amounts(**values),
        percentage=Decimal(percentage) if percentage is not None else None,
    )


def make_fund(positions, currency: str = "EUR", tna: str = "1000", share_classes=()) -> Fund:
    return Fund(
        ordinal=1,
        name="Fund",
        currency=currency,
        total_net_asset_value=make_amounts(**{currency: tna}),
        portfolios=(Portfolio(ordinal=1, positions=tuple(positions)),),
        share_classes=tuple(share_classes),
    )


def make_bond(unique_id: str, maturity: date | None) -> Asset:
    return Asset(unique_id=unique_id, asset_type_code="BO", bond=BondDetails(maturity_date=maturity))


def test_percentage_of_total_guards_zero():
    assert percentage_of_total(1, 0) is None
    assert percentage_of_total(1, 4) == Decimal("25")


def test_distribution_keeps_first_seen_order_and_skips_missing_keys():
    result = distribution(["EQ", "BO", "EQ", None])

    assert result == (
        GroupShare("EQ", 2, Decimal(200) / Decimal(3)),
        GroupShare("BO", 1, Decimal(100) / Decimal(3)),
    )
    assert distribution([]) == ()


def test_grouped_sum_and_distinct():
    sums = grouped_sum(["USD", "EUR", "USD", None], [Decimal("1.10"), Decimal("2"), Decimal("0.90"), Decimal("5")])

    assert list(sums) == ["USD", "EUR"]
    assert sums["USD"] == Decimal("2.00")
    assert sums["EUR"] == Decimal("2")
    assert distinct(["EUR", None, "USD", "EUR"]) == ("EUR", "USD")


def test_rank_holdings_is_stable_for_ties():
    positions = [make_position(i, f"P{i}", pct) for i, pct in enumerate(["10", "30", "10", "30"], start=1)]
    holdings = [Holding("Fund", 1, p, p.percentage) for p in positions]

    ranked = rank_holdings(holdings)

    assert [h.position.unique_id for h in ranked] == ["P2", "P4", "P1", "P3"]


def test_rank_holdings_keeps_full_decimal_precision():
    positions = [
        make_position(1, "A", "10.00000000000000001"),
        make_position(2, "B", "10.00000000000000002"),
    ]
    holdings = [Holding("Fund", 1, p, p.percentage) for p in positions]

    ranked = rank_holdings(holdings)

    assert [h.position.unique_id for h in ranked] == ["B", "A"]


def test_positions_without_percentage_are_counted():
    positions = [make_position(1, "A", "60", EUR="600"), make_position(2, "B", None, EUR="400")]
    fund = make_fund(positions)

    figures = aggregate_fund(fund, FundsDocument.build(funds=[fund]))

    assert figures.portfolios[0].percentage_sum == Decimal("60")
    assert figures.portfolios[0].missing_percentage_positions == (2,)


def test_fund_currency_amount_is_selected_not_summed():
    position = make_position(1, "A", USD="100", EUR="90")
    fund = make_fund([position], currency="USD", tna="100")
    document = FundsDocument.build(funds=[fund])

    figures = aggregate_fund(fund, document)

    assert figures.portfolios[0].value_sum == Decimal("100")
    assert figures.portfolios[0].missing_value_positions == ()


def test_fund_aggregates(sample_document):
    figures = aggregate_document(sample_document).fund(1)

    assert figures.share_class_count == 2
    assert figures.share_class_tna_sum == Decimal("1000000.00")
    assert figures.average_share_class_tna == Decimal("500000.00")
    assert figures.value_by_currency == {"EUR": Decimal("600000.00"), "USD": Decimal("400000.00")}
    assert figures.value_by_asset_type == {"EQ": Decimal("600000.00"), "BO": Decimal("400000.00")}
    assert figures.exposure_by_type == {"Equity": Decimal("600000.00")}
    assert figures.currencies == ("EUR", "USD")
    assert [h.position.unique_id for h in figures.top_holdings] == ["EQ_1", "BO_1"]
    assert figures.concentration == {5: Decimal("100.0"), 10: Decimal("100.0")}


def test_share_classes_missing_fund_currency_tna():
    share_classes = [
        ShareClass(ordinal=1, isin="AT0000A0ABC1", total_net_asset_value=make_amounts(EUR="600")),
        ShareClass(ordinal=2, name="Class USD", total_net_asset_value=make_amounts(USD="450")),
    ]
    fund = make_fund([], share_classes=share_classes)

    figures = aggregate_fund(fund, FundsDocument.build(funds=[fund]))

    assert figures.share_class_tna_sum == Decimal("600")
    assert figures.share_classes_missing_tna == ("Class USD",)
    assert figures.average_share_class_tna == Decimal("600")


def test_concentration_of_top_holdings():
    percentages = ["30", "5", "20", "10", "10", "10", "5", "5", "3", "1", "1"]
    positions = [make_position(i, f"P{i}", pct, EUR="1") for i, pct in enumerate(percentages, start=1)]
    fund = make_fund(positions)

    figures = aggregate_fund(fund, FundsDocument.build(funds=[fund]), top_holdings=3)

    assert [h.position.unique_id for h in figures.top_holdings] == ["P1", "P3", "P4"]
    assert figures.concentration[5] == Decimal("80")
    assert figures.concentration[10] == Decimal("99")


def test_identifier_coverage():
    assets = [
        Asset(unique_id="A", identifiers=Identifiers(isin="DE000BAY0017", sedol="5069211")),
        Asset(unique_id="B", identifiers=Identifiers(isin="US912828Z781")),
        Asset(unique_id="C"),
        Asset(unique_id="D", identifiers=Identifiers(isin="")),
    ]

    coverage = {item.identifier: item for item in identifier_coverage(assets)}

    assert coverage["ISIN"].present == 2
    assert coverage["ISIN"].coverage_pct == Decimal("50")
    assert coverage["ISIN"].primary
    assert coverage["SEDOL"].coverage_pct == Decimal("25")
    assert not coverage["SEDOL"].primary
    assert identifier_coverage([])[0].coverage_pct is None


def test_maturity_ladder_excludes_missing_from_shares():
    content_date = date(2024, 1, 1)
    assets = [
        make_bond("B1", date(2024, 6, 1)),
        make_bond("B2", date(2023, 1, 1)),
        make_bond("B3", date(2034, 6, 1)),
        make_bond("B4", None),
        Asset(unique_id="B5", asset_type_code="BO"),
        Asset(unique_id="E1", asset_type_code="EQ"),
    ]

    ladder = maturity_ladder(assets, content_date)

    assert ladder.buckets[MaturityBucket.UNDER_1Y] == ("B1",)
    assert ladder.buckets[MaturityBucket.EXPIRED] == ("B2",)
    assert ladder.buckets[MaturityBucket.OVER_10Y] == ("B3",)
    assert ladder.missing == ("B4", "B5")
    assert ladder.count(MaturityBucket.NO_DATA) == 2
    assert ladder.share_pct(MaturityBucket.UNDER_1Y) == Decimal(100) / Decimal(3)
    assert ladder.share_pct(MaturityBucket.NO_DATA) is None


def test_orphans_and_unused_assets():
    fund = make_fund([make_position(1, "EQ_1", EUR="1"), make_position(2, "ID_999", EUR="1")])
    assets = [Asset(unique_id="EQ_1", asset_type_code="EQ"), Asset(unique_id="UNUSED", asset_type_code="EQ")]

    aggregates = aggregate_document(FundsDocument.build(funds=[fund], assets=assets))

    assert [(o.portfolio, o.position, o.unique_id) for o in aggregates.orphaned_positions] == [(1, 2, "ID_999")]
    assert aggregates.unused_assets == ("UNUSED",)
    assert aggregates.referenced_ids == frozenset({"EQ_1", "ID_999"})
    assert aggregates.maturity_ladder is None
