from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taxledger.core.brackets import DEFAULT_BRACKETS_FILE
from taxledger.ledger.storage import DEFAULT_LEDGER_FILE

ENV_BOOL_TRUE = {"1", "true", "yes", "on"}
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ENV_BOOL_TRUE


def _env_match() -> Literal["last", "first"]:
    lower = os.getenv("TAX_BRACKET_MATCH", "last").strip().lower()
    return cast(Literal["last", "first"], lower)


@dataclass(frozen=True)
class EvaluationProfile:
    match: Literal["last", "first"]
    additive: bool


class Settings(BaseModel):
    brackets_file: str = Field(default_factory=lambda: os.getenv("TAX_RATES_FILE", DEFAULT_BRACKETS_FILE))
    ledger_file: str = Field(default_factory=lambda: os.getenv("TAX_REPORT_FILE", DEFAULT_LEDGER_FILE))
    bracket_match: Literal["last", "first"] = Field(default_factory=_env_match)
    feature_additive_base_tax: bool = Field(
        default_factory=lambda: _env_bool("FEATURE_ADDITIVE_BASE_TAX", False)
    )
    log_dir: str | None = Field(default_factory=lambda: os.getenv("TAX_LOG_DIR", "logs"))
    log_level: str = Field(default_factory=lambda: os.getenv("TAX_LOG_LEVEL", "INFO"))

    model_config = ConfigDict(frozen=True, validate_default=True)

    @field_validator("bracket_match", mode="before")
    @classmethod
    def _normalize_match(cls, value: str) -> str:
        lower = (value or "last").strip().lower()
        if lower not in {"last", "first"}:
            raise ValueError(f"TAX_BRACKET_MATCH must be last or first, got {value}")
        return lower

    @field_validator("log_dir")
    @classmethod
    def _blank_disables_log_dir(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        upper = value.strip().upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"TAX_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {value}")
        return upper

    def evaluation(self) -> EvaluationProfile:
        return EvaluationProfile(match=self.bracket_match, additive=self.feature_additive_base_tax)

    def level(self) -> int:
        return logging.getLevelName(self.log_level)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
