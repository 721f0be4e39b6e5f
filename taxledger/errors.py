from __future__ import annotations

from enum import Enum


class LoadErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"


class TaxFileError(Exception):
    """Raised when a tax file exists but its content cannot be used."""

    kind = LoadErrorKind.MALFORMED


class BracketFileError(TaxFileError):
    pass


class LedgerFormatError(TaxFileError):
    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


__all__ = [
    "BracketFileError",
    "LedgerFormatError",
    "LoadErrorKind",
    "TaxFileError",
]
