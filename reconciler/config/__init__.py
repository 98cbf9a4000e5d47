"""Configuration package."""

from reconciler.config.settings import (
    AppSettings,
    MatchingSettings,
    Settings,
    SplitSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "MatchingSettings",
    "Settings",
    "SplitSettings",
    "get_settings",
    "validate_all_settings",
]
