from __future__ import annotations

import logging
import re
from decimal import InvalidOperation
from pathlib import Path

from taxledger.core.amounts import parse_amount
from taxledger.core.models import LedgerEntry
from taxledger.errors import LedgerFormatError

logger = logging.getLogger("tax_ledger").getChild("ledger")

DEFAULT_LEDGER_FILE = "taxreport.txt"
LEDGER_HEADER = "Employee ID    Taxable Income    Tax"

_HEADER_PATTERN = re.compile(r"[A-Za-z\s]+")
_ENTRY_PATTERN = re.compile(
    r"\s*(?P<employee_id>\d{4})\s+(?P<income>\d[\d,]*(?:\.\d+)?)\s+(?P<tax>-?\d[\d,]*(?:\.\d+)?)\s*"
)


def append_entry(entry: LedgerEntry, path: str | Path = DEFAULT_LEDGER_FILE) -> bool:
    """Append ``entry`` to the ledger, writing the header first for a new file.

    Returns ``False`` instead of raising when the file cannot be written.
    """
    target = Path(path)
    try:
        is_new = not target.exists()
        with target.open("a", encoding="utf-8") as handle:
            if is_new:
                handle.write(LEDGER_HEADER + "\n")
            handle.write(entry.to_line() + "\n")
    except OSError:
        logger.exception("Failed to append ledger entry for %s to %s", entry.employee_code, target)
        return False
    logger.info("Appended ledger entry for %s to %s", entry.employee_code, target)
    return True


def _parse_entry_line(line: str, number: int) -> LedgerEntry:
    match = _ENTRY_PATTERN.fullmatch(line)
    if match is None:
        raise LedgerFormatError(
            f"Line {number} is not '<id> <income> <tax>': {line.strip()!r}",
            line_number=number,
        )
    tax_text = match.group("tax")
    try:
        tax = parse_amount(tax_text.lstrip("-"))
        return LedgerEntry(
            employee_id=int(match.group("employee_id")),
            taxable_income=parse_amount(match.group("income")),
            total_tax=-tax if tax_text.startswith("-") else tax,
        )
    except (ValueError, InvalidOperation) as exc:
        raise LedgerFormatError(f"Line {number} has an unusable amount: {exc}", line_number=number) from exc


def parse_ledger(lines: list[str]) -> list[LedgerEntry]:
    entries: list[LedgerEntry] = []
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        if _HEADER_PATTERN.fullmatch(line):
            continue
        entries.append(_parse_entry_line(line, number))
    return entries


def read_ledger(path: str | Path = DEFAULT_LEDGER_FILE) -> list[LedgerEntry]:
    """Read ledger entries oldest first.

    Raises ``FileNotFoundError`` for a missing file and ``LedgerFormatError``
    as soon as one line does not have the ledger's column shape.
    """
    source = Path(path)
    entries = parse_ledger(source.read_text(encoding="utf-8").splitlines())
    logger.info("Read %d ledger entries from %s", len(entries), source)
    return entries


__all__ = [
    "DEFAULT_LEDGER_FILE",
    "LEDGER_HEADER",
    "append_entry",
    "parse_ledger",
    "read_ledger",
]
