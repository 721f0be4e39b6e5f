from __future__ import annotations

from .brackets import DEFAULT_BRACKETS_FILE, parse_bracket_line, read_brackets
from .evaluator import TaxAssessment, assess, compute_tax, find_bracket
from .models import UNBOUNDED, BracketRecord, LedgerEntry, Unbounded

__all__ = [
    "DEFAULT_BRACKETS_FILE",
    "UNBOUNDED",
    "BracketRecord",
    "LedgerEntry",
    "TaxAssessment",
    "Unbounded",
    "assess",
    "compute_tax",
    "find_bracket",
    "parse_bracket_line",
    "read_brackets",
]
