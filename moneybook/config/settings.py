"""
Configuration Management for the Parsing Core

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Provider credentials are read from the environment once; the LLM gateway
never touches os.environ itself. It receives an immutable provider config
built from these settings (see moneybook.services.llm.providers).
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderKind(str, Enum):
    """Completion providers the gateway knows how to talk to."""
    KIMI = "kimi"
    FIREWORKS = "fireworks"
    GEMINI = "gemini"


class LLMSettings(BaseSettings):
    """Which provider to use and how long to wait for it."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    provider: ProviderKind = Field(
        default=ProviderKind.KIMI,
        description="Completion provider (kimi, fireworks, gemini)"
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-call deadline; unset means the transport default"
    )
    adaptive_timeout: bool = Field(
        default=False,
        description="Size each deadline by input length instead of timeout_seconds"
    )
    key_fallback: bool = Field(
        default=True,
        description="Use the other of kimi/fireworks when the chosen one has no API key"
    )

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class KimiSettings(BaseSettings):
    """Moonshot Kimi (OpenAI-compatible) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="KIMI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Moonshot API key"
    )
    base_url: str = Field(
        default="https://api.moonshot.ai/v1",
        description="OpenAI-compatible endpoint"
    )
    model: str = Field(
        default="kimi-k2.5",
        description="Model to use"
    )
    # K2.5 only accepts temperature 1
    temperature: float = Field(
        default=1.0,
        ge=0.0,
        le=2.0,
        description="Sampling temperature"
    )
    thinking: bool = Field(
        default=False,
        description="Enable the model's thinking mode"
    )


class FireworksSettings(BaseSettings):
    """Fireworks AI (OpenAI-compatible) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FIREWORKS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Fireworks API key"
    )
    base_url: str = Field(
        default="https://api.fireworks.ai/inference/v1",
        description="OpenAI-compatible endpoint"
    )
    model: str = Field(
        default="accounts/fireworks/models/kimi-k2p5",
        description="Model to use"
    )
    temperature: float = Field(
        default=1.0,
        ge=0.0,
        le=2.0,
        description="Sampling temperature"
    )


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=2048,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Image input limits
    max_image_size_mb: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum decoded image size in MB"
    )
    supported_image_mime_types: str = Field(
        default="image/jpeg,image/png,image/webp,image/heic",
        description="Comma-separated list of accepted image MIME types"
    )

    @property
    def supported_mime_types_list(self) -> list[str]:
        """Get supported MIME types as a list."""
        return [
            mime.strip().lower()
            for mime in self.supported_image_mime_types.split(",")
            if mime.strip()
        ]

    @property
    def max_image_size_bytes(self) -> int:
        """Get max image size in bytes."""
        return self.max_image_size_mb * 1024 * 1024


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

    # Sub-settings are loaded lazily so that only the selected provider
    # needs credentials.

    @property
    def llm(self) -> LLMSettings:
        return LLMSettings()

    @property
    def kimi(self) -> KimiSettings:
        return KimiSettings()

    @property
    def fireworks(self) -> FireworksSettings:
        return FireworksSettings()

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid} plus `<name>_error` entries
    for the failing ones. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("llm", "kimi", "fireworks", "gemini", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
