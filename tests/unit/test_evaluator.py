from decimal import Decimal as D

import pytest

from taxledger.core.brackets import read_brackets
from taxledger.core.evaluator import assess, bracket_tax, compute_tax, find_bracket
from taxledger.core.models import UNBOUNDED, BracketRecord
from tests.fixtures.rates import write_rates


@pytest.fixture
def brackets(tmp_path):
    return read_brackets(write_rates(tmp_path))


def test_flat_zero_bracket_returns_zero_inside_range():
    nil = BracketRecord(lower_threshold=D("0"), upper_threshold=D("18200"))
    for income in (D("0"), D("9000"), D("18200")):
        assert compute_tax([nil], income) == D("0.00")


def test_marginal_rate_ignores_base_tax():
    bracket = BracketRecord(
        lower_threshold=D("18201"),
        upper_threshold=D("37000"),
        base_tax=D("500"),
        marginal_rate_cents=D("19"),
        marginal_rate_floor=D("18200"),
    )
    assert compute_tax([bracket], D("37000")) == D("3572.00")


def test_additive_formula_is_opt_in():
    bracket = BracketRecord(
        lower_threshold=D("37001"),
        upper_threshold=D("90000"),
        base_tax=D("3572"),
        marginal_rate_cents=D("32.5"),
        marginal_rate_floor=D("37000"),
    )
    assert bracket_tax(bracket, D("50000")) == D("4225.000")
    assert bracket_tax(bracket, D("50000"), additive=True) == D("7797.000")
    assert compute_tax([bracket], D("50000"), additive=True) == D("7797.00")


@pytest.mark.parametrize(
    "income,expected",
    [
        (D("0"), D("0.00")),
        (D("18200"), D("0.00")),
        (D("37000"), D("3572.00")),
        (D("50000"), D("4225.00")),
        (D("90000"), D("17225.00")),
        (D("120000"), D("11100.00")),
        (D("200000"), D("9000.00")),
    ],
)
def test_sample_schedule(brackets, income, expected):
    assert compute_tax(brackets, income) == expected


def test_income_in_gap_between_brackets_is_zero(brackets):
    assessment = assess(brackets, D("18200.50"))
    assert assessment.bracket is None
    assert assessment.tax == D("0.00")


def test_bounds_are_inclusive(brackets):
    assert find_bracket(brackets, D("18201")).lower_threshold == D("18201")
    assert find_bracket(brackets, D("37000")).upper_threshold == D("37000")
    assert find_bracket(brackets, D("10000000")).upper_threshold is UNBOUNDED


def test_last_matching_bracket_wins_by_default():
    early = BracketRecord(lower_threshold=D("0"), upper_threshold=D("100"), base_tax=D("10"))
    late = BracketRecord(lower_threshold=D("50"), upper_threshold=D("150"), base_tax=D("20"))
    assert find_bracket([early, late], D("75")) is late
    assert compute_tax([early, late], D("75")) == D("20.00")


def test_first_match_mode_stops_early():
    early = BracketRecord(lower_threshold=D("0"), upper_threshold=D("100"), base_tax=D("10"))
    late = BracketRecord(lower_threshold=D("50"), upper_threshold=D("150"), base_tax=D("20"))
    assert find_bracket([early, late], D("75"), match="first") is early
    assert compute_tax([early, late], D("75"), match="first") == D("10.00")


def test_unknown_match_mode_rejected():
    with pytest.raises(ValueError):
        find_bracket([], D("1"), match="middle")


def test_negative_income_treated_as_zero(brackets):
    assessment = assess(brackets, D("-500"))
    assert assessment.income == D("0")
    assert assessment.tax == D("0.00")


def test_no_brackets_means_no_tax():
    assert compute_tax([], D("50000")) == D("0.00")


def test_rounding_to_cents():
    bracket = BracketRecord(
        lower_threshold=D("0"),
        upper_threshold=UNBOUNDED,
        marginal_rate_cents=D("32.5"),
        marginal_rate_floor=D("0"),
    )
    assert compute_tax([bracket], D("0.03")) == D("0.01")
