import pytest

from fundsxml_checker.domain.identifiers import (
    check_bic,
    check_isin,
    check_lei,
    is_valid_bic,
    is_valid_currency,
    is_valid_isin,
    is_valid_lei,
)


@pytest.mark.parametrize("value", ["DE000BAY0017", "US912828Z781", "AT0000A0ABC1"])
def test_valid_isins(value: str):
    assert is_valid_isin(value)


def test_isin_length_checked_before_pattern():
    result = check_isin("DE00BAY001")
    assert not result
    assert "12 characters" in result.reason


def test_isin_must_start_with_country_letters():
    result = check_isin("12000BAY0017")
    assert not result.valid
    assert "2 letters" in result.reason


def test_isin_rejects_lowercase_and_missing_value():
    assert not is_valid_isin("de000bay0017")
    assert not is_valid_isin(None)


def test_lei_format():
    assert is_valid_lei("529900T8BM49AURSDO55")
    assert not is_valid_lei("529900T8BM49AURSDOXX")

    short = check_lei("529900T8BM49AURSDO5")
    assert not short
    assert "20 characters" in short.reason


def test_bic_lengths():
    assert is_valid_bic("DEUTDEFF")
    assert is_valid_bic("DEUTDEFF500")
    assert not is_valid_bic("DEUT1EFF")
    assert "8 or 11" in check_bic("DEUTDEFF5").reason


def test_currency_codes():
    assert is_valid_currency("EUR")
    assert not is_valid_currency("eur")
    assert not is_valid_currency("EURO")
    assert not is_valid_currency("EUR\n")
