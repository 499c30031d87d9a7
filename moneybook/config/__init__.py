"""Configuration package."""

from moneybook.config.settings import (
    AppSettings,
    FireworksSettings,
    GeminiSettings,
    KimiSettings,
    LLMSettings,
    ProviderKind,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "FireworksSettings",
    "GeminiSettings",
    "KimiSettings",
    "LLMSettings",
    "ProviderKind",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
