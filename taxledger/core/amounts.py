from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

D = Decimal

_CENT = D("0.01")
_AMOUNT_PATTERN = re.compile(r"\$?\s*(?P<digits>\d[\d,]*(?:\.\d+)?)")


def quantize_cents(value: D) -> D:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def parse_amount(text: str) -> D:
    """Parse a currency amount such as ``$18,201``, ``3572`` or ``$ 1,234.50``.

    Amounts too large to hold to the cent raise ``ValueError`` like any other
    unreadable amount.
    """
    match = _AMOUNT_PATTERN.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"Could not understand amount '{text}'.")
    cleaned = match.group("digits").replace(",", "")
    try:
        value = D(cleaned)
        quantize_cents(value)
    except InvalidOperation as exc:
        raise ValueError(f"Amount '{text}' is too large.") from exc
    return value


def format_amount(value: D) -> str:
    if value == value.to_integral_value():
        return f"{value.to_integral_value():,}"
    return f"{quantize_cents(value):,}"


__all__ = ["D", "format_amount", "parse_amount", "quantize_cents"]
