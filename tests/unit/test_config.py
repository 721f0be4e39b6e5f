import pytest
from pydantic import ValidationError

from taxledger.config import Settings, get_settings


def test_defaults():
    settings = Settings()
    assert settings.brackets_file == "taxrates.txt"
    assert settings.ledger_file == "taxreport.txt"
    assert settings.bracket_match == "last"
    assert settings.feature_additive_base_tax is False
    profile = settings.evaluation()
    assert profile.match == "last"
    assert profile.additive is False


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TAX_RATES_FILE", "/srv/rates/taxrates.txt")
    monkeypatch.setenv("TAX_BRACKET_MATCH", "FIRST")
    monkeypatch.setenv("FEATURE_ADDITIVE_BASE_TAX", "yes")
    monkeypatch.setenv("TAX_LOG_LEVEL", "debug")
    get_settings.cache_clear()
    settings = get_settings()
    assert settings.brackets_file == "/srv/rates/taxrates.txt"
    assert settings.bracket_match == "first"
    assert settings.feature_additive_base_tax is True
    assert settings.log_level == "DEBUG"
    assert settings.level() == 10
    get_settings.cache_clear()


def test_invalid_match_mode_rejected(monkeypatch):
    monkeypatch.setenv("TAX_BRACKET_MATCH", "middle")
    with pytest.raises(ValidationError):
        Settings()


def test_invalid_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


def test_blank_log_dir_disables_sink():
    assert Settings(log_dir="  ").log_dir is None
    assert Settings(log_dir="logs").log_dir == "logs"


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.bracket_match = "first"
