"""
Configuration Management for Household Reconciler

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The matching constants were chosen empirically, so they are exposed as
settings rather than buried as literals in the matcher.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from reconciler.matching.duplicates import MatchPolicy


class MatchingSettings(BaseSettings):
    """Duplicate matcher tolerances and score weights."""

    model_config = SettingsConfigDict(
        env_prefix="MATCHING_",
        extra="ignore"
    )

    date_tolerance_days: int = Field(
        default=2,
        ge=0,
        le=31,
        description="Maximum days between transaction and expense"
    )
    amount_tolerance: Decimal = Field(
        default=Decimal("5"),
        ge=0,
        description="Maximum absolute amount difference"
    )
    min_word_length: int = Field(
        default=2,
        ge=1,
        description="Shorter description tokens are ignored"
    )
    word_weight: int = Field(
        default=10,
        ge=0,
        description="Score per common description word"
    )
    date_weight: int = Field(
        default=3,
        ge=0,
        description="Score per day of remaining date tolerance"
    )
    exact_amount_bonus: int = Field(
        default=10,
        ge=0,
        description="Score for an exact amount match"
    )

    def to_policy(self) -> MatchPolicy:
        """Build the matcher policy from these settings."""
        return MatchPolicy(
            date_tolerance_days=self.date_tolerance_days,
            amount_tolerance=self.amount_tolerance,
            min_word_length=self.min_word_length,
            word_weight=self.word_weight,
            date_weight=self.date_weight,
            exact_amount_bonus=self.exact_amount_bonus,
        )


class SplitSettings(BaseSettings):
    """Credit card invoice splitting configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPLIT_",
        extra="ignore"
    )

    invoice_break_day: int = Field(
        default=1,
        ge=1,
        le=28,
        description="Day of month from which purchases land on the next invoice"
    )
    currency: str = Field(
        default="SEK",
        min_length=3,
        max_length=3,
        description="Currency label used in audit messages"
    )

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper()


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

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def matching(self) -> MatchingSettings:
        return MatchingSettings()

    @property
    def split(self) -> SplitSettings:
        return SplitSettings()

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

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("matching", "split", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
