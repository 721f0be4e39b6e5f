"""Two-step file loading: default path first, then one user-supplied alternate.

Loaders raise ``FileNotFoundError`` for a missing file and a ``TaxFileError``
for unusable content. ``attempt_load`` folds both into a ``LoadResult`` so
callers branch on ``LoadErrorKind`` instead of nesting ``try`` blocks.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, TypeVar

from taxledger.errors import LoadErrorKind, TaxFileError

logger = logging.getLogger("tax_ledger").getChild("loading")

T = TypeVar("T")


@dataclass(frozen=True)
class LoadError:
    kind: LoadErrorKind
    path: Path
    message: str


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    path: Path
    value: T | None = None
    error: LoadError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def attempt_load(loader: Callable[[Path], T], path: str | Path) -> LoadResult[T]:
    target = Path(path)
    try:
        value = loader(target)
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError):
        logger.warning("File not found at %s", target)
        return LoadResult(
            path=target,
            error=LoadError(LoadErrorKind.NOT_FOUND, target, f"{target} was not found"),
        )
    except TaxFileError as exc:
        logger.warning("Unusable content in %s: %s", target, exc)
        return LoadResult(path=target, error=LoadError(exc.kind, target, str(exc)))
    except UnicodeDecodeError as exc:
        logger.warning("Could not decode %s: %s", target, exc)
        return LoadResult(
            path=target,
            error=LoadError(LoadErrorKind.MALFORMED, target, f"{target} is not a text file"),
        )
    return LoadResult(path=target, value=value)


def load_with_fallback(
    loader: Callable[[Path], T],
    default_path: str | Path,
    ask_alternate: Callable[[LoadError], str | Path | None],
) -> LoadResult[T]:
    first = attempt_load(loader, default_path)
    if first.error is None or first.error.kind is not LoadErrorKind.NOT_FOUND:
        return first
    alternate = ask_alternate(first.error)
    if alternate is None:
        return first
    return attempt_load(loader, alternate)


__all__ = [
    "LoadError",
    "LoadResult",
    "attempt_load",
    "load_with_fallback",
]
