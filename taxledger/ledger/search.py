from __future__ import annotations

import logging
from typing import Sequence

from taxledger.core.models import LedgerEntry

logger = logging.getLogger("tax_ledger").getChild("search")


def find_latest(entries: Sequence[LedgerEntry], employee_id: int) -> LedgerEntry | None:
    # Entries are in append order; the newest match is the one that counts.
    for entry in reversed(entries):
        if entry.employee_id == employee_id:
            logger.info("Found ledger entry for %04d", employee_id)
            return entry
    logger.info("No ledger entry for %04d", employee_id)
    return None


def latest_by_employee(entries: Sequence[LedgerEntry]) -> dict[int, LedgerEntry]:
    latest: dict[int, LedgerEntry] = {}
    for entry in entries:
        latest[entry.employee_id] = entry
    return dict(sorted(latest.items()))


__all__ = ["find_latest", "latest_by_employee"]
