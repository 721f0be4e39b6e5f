from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Literal

from .amounts import D, quantize_cents
from .models import BracketRecord

logger = logging.getLogger("tax_ledger").getChild("evaluator")

MatchMode = Literal["last", "first"]
MATCH_MODES: tuple[MatchMode, ...] = ("last", "first")


@dataclass(frozen=True)
class TaxAssessment:
    income: D
    bracket: BracketRecord | None
    tax: D


def find_bracket(
    brackets: Iterable[BracketRecord],
    income: D,
    *,
    match: MatchMode = "last",
) -> BracketRecord | None:
    """Locate the bracket containing ``income``.

    Brackets are scanned in stored order and ranges are inclusive at both
    ends. With ``match="last"`` a later containing bracket replaces an earlier
    one, so overlapping rows resolve to the one furthest down the file.
    """
    if match not in MATCH_MODES:
        raise ValueError(f"match must be one of {MATCH_MODES}, got {match!r}")
    found: BracketRecord | None = None
    for bracket in brackets:
        if bracket.contains(income):
            found = bracket
            if match == "first":
                break
    return found


def bracket_tax(bracket: BracketRecord, income: D, *, additive: bool = False) -> D:
    # Flat brackets charge the base amount; rated brackets charge only the
    # marginal part unless the additive formula is switched on.
    if bracket.marginal_rate_cents == 0:
        return bracket.base_tax
    marginal = (income - bracket.marginal_rate_floor) * (bracket.marginal_rate_cents / D("100"))
    if additive:
        return bracket.base_tax + marginal
    return marginal


def assess(
    brackets: Iterable[BracketRecord],
    income: D,
    *,
    match: MatchMode = "last",
    additive: bool = False,
) -> TaxAssessment:
    ti = max(D("0"), income)
    bracket = find_bracket(brackets, ti, match=match)
    if bracket is None:
        logger.info("No tax bracket contains income %s", ti)
        return TaxAssessment(income=ti, bracket=None, tax=quantize_cents(D("0")))
    tax = quantize_cents(bracket_tax(bracket, ti, additive=additive))
    return TaxAssessment(income=ti, bracket=bracket, tax=tax)


def compute_tax(
    brackets: Iterable[BracketRecord],
    income: D,
    *,
    match: MatchMode = "last",
    additive: bool = False,
) -> D:
    return assess(brackets, income, match=match, additive=additive).tax


__all__ = [
    "MATCH_MODES",
    "MatchMode",
    "TaxAssessment",
    "assess",
    "bracket_tax",
    "compute_tax",
    "find_bracket",
]
