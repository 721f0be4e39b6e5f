"""Bracket file parsing.

A bracket file is free text. Only lines that open with a threshold
expression are bracket data, for example::

    Taxable income          Tax on this income
    0 – $18,200             Nil
    $18,201 – $37,000       19c for each $1 over $18,200
    $37,001 – $90,000       $3,572 plus 32.5c for each $1 over $37,000
    $180,001 and over       $54,097 plus 45c for each $1 over $180,000

Each line is tokenized once and the token stream is read by a small
recursive-descent parser. Headers and prose produce no record.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import InvalidOperation
from pathlib import Path
from typing import Iterator, Literal

from taxledger.errors import BracketFileError

from .amounts import D, parse_amount
from .models import UNBOUNDED, BracketRecord, Unbounded

logger = logging.getLogger("tax_ledger").getChild("brackets")

DEFAULT_BRACKETS_FILE = "taxrates.txt"

_DASHES = "\\-\u2010\u2011\u2012\u2013\u2014\u2015\u2212\ufe58\ufe63\uff0d"

TokenKind = Literal[
    "RATE_CENTS",
    "FOR_EACH",
    "AMOUNT",
    "DASH",
    "AND_OVER",
    "PLUS",
    "NIL",
    "WORD",
]

_TOKEN_PATTERN = re.compile(
    rf"""
    (?P<RATE_CENTS>\d+(?:\.\d+)?\s?c\b)
  | (?P<FOR_EACH>for\s+each\s+\$\s?1\s+over\b)
  | (?P<AMOUNT>\$?\s?\d[\d,]*(?:\.\d+)?)
  | (?P<DASH>[{_DASHES}])
  | (?P<AND_OVER>and\s+over\b)
  | (?P<PLUS>plus\b)
  | (?P<NIL>nil\b)
  | (?P<WORD>\S+?(?=\s|$|[{_DASHES}])|\S+)
    """,
    re.IGNORECASE | re.VERBOSE,
)
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str


def tokenize(line: str) -> Iterator[Token]:
    pos = 0
    end = len(line)
    while pos < end:
        space = _WHITESPACE.match(line, pos)
        if space is not None:
            pos = space.end()
            continue
        match = _TOKEN_PATTERN.match(line, pos)
        if match is None or match.end() == pos:  # pragma: no cover - WORD always consumes
            return
        kind = match.lastgroup
        yield Token(kind, match.group(kind))  # type: ignore[arg-type]
        pos = match.end()


class _LineParser:
    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def _peek(self, offset: int = 0) -> Token | None:
        index = self.pos + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def _accept(self, kind: TokenKind) -> Token | None:
        token = self._peek()
        if token is not None and token.kind == kind:
            self.pos += 1
            return token
        return None

    def threshold(self) -> tuple[D, D | Unbounded] | None:
        lower = self._accept("AMOUNT")
        if lower is None:
            return None
        if self._accept("AND_OVER") is not None:
            return parse_amount(lower.text), UNBOUNDED
        if self._accept("DASH") is None:
            return None
        upper = self._accept("AMOUNT")
        if upper is None:
            return None
        return parse_amount(lower.text), parse_amount(upper.text)

    def tail(self) -> tuple[D, D, D]:
        base_tax = D("0")
        rate_cents = D("0")
        rate_floor = D("0")
        saw_plus = False
        saw_rate = False
        trailing_amount: Token | None = None
        while (token := self._peek()) is not None:
            following = self._peek(1)
            if token.kind == "AMOUNT" and following is not None and following.kind == "PLUS":
                base_tax = parse_amount(token.text)
                saw_plus = True
                self.pos += 2
                continue
            if token.kind == "PLUS":
                saw_plus = True
                self.pos += 1
                if following is not None and following.kind == "AMOUNT":
                    base_tax = parse_amount(following.text)
                    self.pos += 1
                continue
            if token.kind == "RATE_CENTS" and following is not None and following.kind == "FOR_EACH":
                floor = self._peek(2)
                if floor is not None and floor.kind == "AMOUNT":
                    rate_cents = D(token.text.rstrip("cC").strip())
                    rate_floor = parse_amount(floor.text)
                    saw_rate = True
                    self.pos += 3
                    continue
            trailing_amount = token if token.kind == "AMOUNT" else None
            self.pos += 1
        if trailing_amount is not None and not saw_plus and not saw_rate:
            base_tax = parse_amount(trailing_amount.text)
        return base_tax, rate_cents, rate_floor


def parse_bracket_line(line: str) -> BracketRecord | None:
    """Return the bracket described by ``line`` or ``None`` for non-data lines."""
    parser = _LineParser(list(tokenize(line)))
    try:
        threshold = parser.threshold()
        if threshold is None:
            return None
        base_tax, rate_cents, rate_floor = parser.tail()
    except (ValueError, InvalidOperation):
        return None
    lower, upper = threshold
    return BracketRecord(
        lower_threshold=lower,
        upper_threshold=upper,
        base_tax=base_tax,
        marginal_rate_cents=rate_cents,
        marginal_rate_floor=rate_floor,
    )


def parse_brackets(lines: list[str] | tuple[str, ...]) -> tuple[BracketRecord, ...]:
    records: list[BracketRecord] = []
    for number, line in enumerate(lines, start=1):
        record = parse_bracket_line(line)
        if record is None:
            if line.strip():
                logger.debug("Skipping non-bracket line %d: %r", number, line)
            continue
        records.append(record)
    return tuple(records)


def read_brackets(path: str | Path = DEFAULT_BRACKETS_FILE) -> tuple[BracketRecord, ...]:
    source = Path(path)
    text = source.read_text(encoding="utf-8")
    records = parse_brackets(text.splitlines())
    if not records:
        raise BracketFileError(f"No tax brackets found in {source}")
    logger.info("Loaded %d tax brackets from %s", len(records), source)
    return records


__all__ = [
    "DEFAULT_BRACKETS_FILE",
    "Token",
    "parse_bracket_line",
    "parse_brackets",
    "read_brackets",
    "tokenize",
]
