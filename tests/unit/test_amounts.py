from decimal import Decimal as D

import pytest

from taxledger.core.amounts import format_amount, parse_amount, quantize_cents


@pytest.mark.parametrize(
    "text,expected",
    [
        ("$18,201", D("18201")),
        ("18201", D("18201")),
        ("0", D("0")),
        ("$ 5,092.50", D("5092.50")),
        ("  $50,000.00 ", D("50000.00")),
    ],
)
def test_parse_amount_accepts_currency_forms(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "$", "abc", "12a", "-5", "$1,000 plus"])
def test_parse_amount_rejects_non_amounts(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_quantize_cents_rounds_half_up():
    assert quantize_cents(D("1.005")) == D("1.01")
    assert quantize_cents(D("3572")) == D("3572.00")


def test_format_amount_drops_zero_cents():
    assert format_amount(D("18200")) == "18,200"
    assert format_amount(D("18200.00")) == "18,200"
    assert format_amount(D("1234.5")) == "1,234.50"


def test_parse_amount_rejects_amounts_too_large_for_cents():
    with pytest.raises(ValueError):
        parse_amount("1" * 28)
    assert parse_amount("1" * 25) == D("1" * 25)
