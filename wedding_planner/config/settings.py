"""
Configuration Management for Wedding Planner

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every value has a default so the planner runs with no .env at all.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WEDDING_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one file per storage key"
    )

    # Collection slots
    people_key: str = Field(
        default="wedding_people",
        description="Storage key of the guest list"
    )
    expenses_key: str = Field(
        default="wedding_expenses",
        description="Storage key of the expense list"
    )
    audit_key: str = Field(
        default="wedding_audit",
        description="Storage key of the audit trail"
    )
    audit_max_events: int = Field(
        default=500,
        ge=10,
        le=10000,
        description="How many audit events are kept"
    )
    fsync: bool = Field(
        default=True,
        description="fsync files before renaming them into place"
    )


class MessagingSettings(BaseSettings):
    """Outbound SMS / WhatsApp configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WEDDING_MESSAGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_country_code: str = Field(
        default="90",
        description="Country code prefixed to numbers that lack one"
    )

    @field_validator("default_country_code")
    @classmethod
    def digits_only(cls, v: str) -> str:
        v = v.strip().lstrip("+")
        if not v.isdigit():
            raise ValueError(f"Country code must be digits, got: {v!r}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_json: bool = Field(
        default=False,
        description="Render log lines as JSON instead of console output"
    )

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
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
    def messaging(self) -> MessagingSettings:
        return MessagingSettings()

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
