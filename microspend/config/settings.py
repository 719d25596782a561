"""
Configuration Management for MicroSpend

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Nothing else in the package reads os.environ directly.
"""

import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_CURRENCY_CODES = ("CAD", "USD", "NPR", "GBP")


class StorageSettings(BaseSettings):
    """Local SQLite store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MICROSPEND_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    path: str = Field(
        default="microspend.db",
        description="Path to the SQLite database file (':memory:' for a throwaway store)"
    )


class ExportSettings(BaseSettings):
    """CSV export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MICROSPEND_EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    directory: str = Field(
        default_factory=lambda: str(Path(tempfile.gettempdir()) / "microspend"),
        description="Directory the CSV file is written to before sharing"
    )
    filename: str = Field(
        default="microspend_expenses.csv",
        min_length=1,
        description="Name of the exported CSV file"
    )

    # Simulated "watch an ad" gate
    ad_playback_seconds: float = Field(
        default=2.5,
        ge=0.0,
        le=30.0,
        description="How long the ad plays (cannot be cancelled)"
    )
    ad_completed_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=10.0,
        description="How long the 'Ad completed' notice stays up"
    )

    @field_validator('filename')
    @classmethod
    def validate_filename(cls, v: str) -> str:
        """Filename only, no directories."""
        if Path(v).name != v:
            raise ValueError(f"Export filename must not contain a path: {v}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MICROSPEND_",
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

    # Defaults
    default_currency: str = Field(
        default="CAD",
        description="Currency used until the user picks one"
    )
    max_note_length: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Maximum length of an expense note"
    )

    @field_validator('default_currency')
    @classmethod
    def validate_default_currency(cls, v: str) -> str:
        code = v.strip().upper()
        if code not in SUPPORTED_CURRENCY_CODES:
            raise ValueError(
                f"Unsupported default currency: {v}. "
                f"Allowed: {', '.join(SUPPORTED_CURRENCY_CODES)}"
            )
        return code


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
    def export(self) -> ExportSettings:
        return ExportSettings()

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


def validate_all_settings() -> dict:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries for the ones that failed. Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("storage", "export", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
