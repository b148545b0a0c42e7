"""
Configuration Management for Finance Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, validation limits and retry budgets are read once
and validated at startup.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    backend: Literal["json_file", "memory"] = Field(
        default="json_file",
        description="Which key-value backend holds the ledger"
    )
    path: str = Field(
        default="ledger_data.json",
        description="File used by the json_file backend"
    )
    key: str = Field(
        default="transactions",
        min_length=1,
        description="Slot name the whole ledger is stored under"
    )
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a file read/write before giving up"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    
    # Validation limits
    max_amount: float = Field(
        default=1_000_000_000.0,
        gt=0,
        le=1e15,
        description="Largest amount accepted for a single transaction"
    )
    max_decimal_places: int = Field(
        default=8,
        ge=0,
        le=10,
        description="Most digits accepted after the decimal point"
    )
    max_description_length: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Longest description accepted"
    )
    
    # Id generation
    max_id_attempts: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Fresh ids tried before an insert collision is reported"
    )
    
    @field_validator('max_amount')
    @classmethod
    def validate_max_amount(cls, v: float) -> float:
        """Reject non-finite caps."""
        if v != v or v == float("inf"):
            raise ValueError("max_amount must be a finite number")
        return v


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, with an
    ``<name>_error`` entry for each failure. Useful for startup checks.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
