"""Tax bracket calculator with a flat-file ledger of past results."""
from __future__ import annotations

import logging

__version__ = "0.1.0"

logging.getLogger("tax_ledger").addHandler(logging.NullHandler())
