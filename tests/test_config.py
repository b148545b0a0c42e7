"""Tests for pydantic-settings configuration."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from finance_ledger.config import (
    AppSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


class TestSettings:
    """Tests for defaults and environment overrides."""
    
    def test_defaults(self, monkeypatch):
        for name in ("LEDGER_STORAGE_BACKEND", "LEDGER_STORAGE_KEY", "LEDGER_MAX_AMOUNT"):
            monkeypatch.delenv(name, raising=False)
        storage = StorageSettings(_env_file=None)
        app = AppSettings(_env_file=None)
        assert storage.backend == "json_file"
        assert storage.key == "transactions"
        assert app.max_description_length == 200
        assert app.max_id_attempts == 5
    
    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("LEDGER_MAX_DESCRIPTION_LENGTH", "50")
        assert StorageSettings().backend == "memory"
        assert AppSettings().max_description_length == 50
    
    def test_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "sheets")
        with pytest.raises(PydanticValidationError):
            StorageSettings()
    
    def test_rejects_infinite_max_amount(self):
        with pytest.raises(PydanticValidationError):
            AppSettings(max_amount=float("inf"))
    
    def test_amount_limits(self):
        assert AppSettings(_env_file=None).max_decimal_places == 8
        with pytest.raises(PydanticValidationError):
            AppSettings(max_decimal_places=11)
        with pytest.raises(PydanticValidationError):
            AppSettings(max_amount=1e16)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
    
    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_RETRY_ATTEMPTS", "0")
        status = validate_all_settings()
        assert status["storage"] is False
        assert "storage_error" in status
        assert status["app"] is True
