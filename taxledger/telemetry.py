from __future__ import annotations

import logging
from pathlib import Path

from taxledger.config import Settings, get_settings

LOGGER_NAME = "tax_ledger"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def open_log_sink(settings: Settings | None = None, app_label: str = "tax-ledger") -> logging.Handler | None:
    resolved = settings or get_settings()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved.level())
    if resolved.log_dir is None:
        return None
    logs_dir = Path(resolved.log_dir)
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("Unable to create logs directory %s: %s", logs_dir, exc)
        return None
    handler = logging.FileHandler(logs_dir / f"{app_label}.log", encoding="utf-8")
    handler.setLevel(resolved.level())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler


def close_log_sink(handler: logging.Handler | None) -> None:
    if handler is None:
        return
    logging.getLogger(LOGGER_NAME).removeHandler(handler)
    handler.close()


__all__ = ["LOGGER_NAME", "LOG_FORMAT", "close_log_sink", "open_log_sink"]
