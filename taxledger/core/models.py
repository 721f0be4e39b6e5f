from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .amounts import D, format_amount, quantize_cents


class Unbounded(Enum):
    """Upper threshold of the top bracket: no upper limit."""

    UNBOUNDED = "unbounded"

    def __repr__(self) -> str:
        return "UNBOUNDED"


UNBOUNDED = Unbounded.UNBOUNDED


@dataclass(frozen=True)
class BracketRecord:
    lower_threshold: D
    upper_threshold: D | Unbounded
    base_tax: D = D("0")
    marginal_rate_cents: D = D("0")
    marginal_rate_floor: D = D("0")

    @property
    def is_unbounded(self) -> bool:
        return self.upper_threshold is UNBOUNDED

    def contains(self, income: D) -> bool:
        if income < self.lower_threshold:
            return False
        if self.upper_threshold is UNBOUNDED:
            return True
        return income <= self.upper_threshold

    def describe(self) -> str:
        if self.upper_threshold is UNBOUNDED:
            text = f"For the threshold ${format_amount(self.lower_threshold)} and above"
        else:
            text = (
                f"For the threshold ${format_amount(self.lower_threshold)}"
                f" to ${format_amount(self.upper_threshold)}"
            )
        text += f" the base tax is: ${format_amount(self.base_tax)}"
        if self.marginal_rate_cents != 0 and self.marginal_rate_floor != 0:
            rate = f"{self.marginal_rate_cents.normalize():f}"
            text += f" plus {rate}c for every $1 over ${format_amount(self.marginal_rate_floor)}"
        return text


def _quantize_decimal(value: Decimal) -> Decimal:
    try:
        return quantize_cents(value)
    except InvalidOperation as exc:
        raise ValueError("amount is too large to record to the cent") from exc


class LedgerEntry(BaseModel):
    employee_id: int = Field(..., ge=0, le=9999)
    taxable_income: Decimal = Field(..., ge=0)
    total_tax: Decimal

    model_config = ConfigDict(frozen=True)

    _quantize_amounts = field_validator(
        "taxable_income",
        "total_tax",
        mode="after",
    )(_quantize_decimal)

    @property
    def employee_code(self) -> str:
        return f"{self.employee_id:04d}"

    def to_line(self) -> str:
        return f"{self.employee_code}    {self.taxable_income:.2f}    {self.total_tax:.2f}"

    def describe(self) -> str:
        return (
            f"For Employee ID: {self.employee_code}"
            f"\nIncome is: ${self.taxable_income:.2f}"
            f"\nTax on that income was: ${self.total_tax:.2f}"
        )


__all__ = ["UNBOUNDED", "BracketRecord", "LedgerEntry", "Unbounded"]
