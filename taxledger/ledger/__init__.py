from __future__ import annotations

from .search import find_latest, latest_by_employee
from .storage import (
    DEFAULT_LEDGER_FILE,
    LEDGER_HEADER,
    append_entry,
    parse_ledger,
    read_ledger,
)

__all__ = [
    "DEFAULT_LEDGER_FILE",
    "LEDGER_HEADER",
    "append_entry",
    "find_latest",
    "latest_by_employee",
    "parse_ledger",
    "read_ledger",
]
