import pathlib
import sys

import pytest

p = str(pathlib.Path(__file__).resolve().parents[1])
sys.path.insert(0, p) if p not in sys.path else None

from taxledger.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
        # Keep test runs from writing logs/ into the working tree.
        monkeypatch.setenv("TAX_LOG_DIR", "")
        for name in (
                "TAX_RATES_FILE",
                "TAX_REPORT_FILE",
                "TAX_BRACKET_MATCH",
                "TAX_LOG_LEVEL",
                "FEATURE_ADDITIVE_BASE_TAX",
        ):
                monkeypatch.delenv(name, raising=False)
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()
