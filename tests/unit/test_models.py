from decimal import Decimal as D

import pytest
from pydantic import ValidationError

from taxledger.core.models import UNBOUNDED, BracketRecord, LedgerEntry


def test_ledger_entry_quantizes_amounts():
    entry = LedgerEntry(employee_id=7, taxable_income=D("50000"), total_tax=D("1234.555"))
    assert entry.taxable_income == D("50000.00")
    assert entry.total_tax == D("1234.56")
    assert entry.employee_code == "0007"


def test_ledger_entry_line_layout():
    entry = LedgerEntry(employee_id=7, taxable_income=D("50000"), total_tax=D("1234.56"))
    assert entry.to_line() == "0007    50000.00    1234.56"


def test_ledger_entry_accepts_padded_text_id():
    entry = LedgerEntry(employee_id="0042", taxable_income=D("1"), total_tax=D("0"))
    assert entry.employee_id == 42


@pytest.mark.parametrize("employee_id", [-1, 10000])
def test_ledger_entry_rejects_out_of_range_id(employee_id):
    with pytest.raises(ValidationError):
        LedgerEntry(employee_id=employee_id, taxable_income=D("1"), total_tax=D("0"))


def test_ledger_entry_is_immutable():
    entry = LedgerEntry(employee_id=1, taxable_income=D("1"), total_tax=D("0"))
    with pytest.raises(ValidationError):
        entry.total_tax = D("5")


def test_ledger_entry_describe():
    entry = LedgerEntry(employee_id=12, taxable_income=D("50000"), total_tax=D("4225"))
    assert entry.describe().splitlines() == [
        "For Employee ID: 0012",
        "Income is: $50000.00",
        "Tax on that income was: $4225.00",
    ]


def test_bracket_describe_with_rate():
    bracket = BracketRecord(
        lower_threshold=D("37001"),
        upper_threshold=D("90000"),
        base_tax=D("3572"),
        marginal_rate_cents=D("32.5"),
        marginal_rate_floor=D("37000"),
    )
    assert bracket.describe() == (
        "For the threshold $37,001 to $90,000 the base tax is: $3,572"
        " plus 32.5c for every $1 over $37,000"
    )


def test_bracket_describe_unbounded_without_rate():
    bracket = BracketRecord(lower_threshold=D("180001"), upper_threshold=UNBOUNDED)
    assert bracket.describe() == "For the threshold $180,001 and above the base tax is: $0"


def test_bracket_contains_is_inclusive():
    bracket = BracketRecord(lower_threshold=D("10"), upper_threshold=D("20"))
    assert bracket.contains(D("10"))
    assert bracket.contains(D("20"))
    assert not bracket.contains(D("9.99"))
    assert not bracket.contains(D("20.01"))
