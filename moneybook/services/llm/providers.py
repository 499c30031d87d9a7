"""
Provider Configuration

Each provider binds its own endpoint, model, temperature and request
extensions. The selection is resolved ONCE (normally at startup) into an
immutable ProviderConfig that is passed to the gateway. Nothing is cached
at module level; tests build their own configs.

Adding a provider means:
1. A new ProviderKind member
2. A settings class in moneybook.config.settings
3. One branch here and one in moneybook.services.llm.clients
"""

from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from moneybook.config import LLMSettings, ProviderKind, Settings, get_settings
from moneybook.services.llm.interface import ProviderConfigError

logger = structlog.get_logger(__name__)

PROVIDER_CONFIG_ERROR_MESSAGE = (
    "AI 파서 설정이 비어 있어요. 관리자에게 API 키 설정을 요청해 주세요."
)

# Providers that can stand in for each other when one has no key
KEY_FALLBACK_ORDER = (ProviderKind.KIMI, ProviderKind.FIREWORKS)


class ProviderConfig(BaseModel):
    """Everything the gateway needs to call one provider."""

    model_config = ConfigDict(frozen=True)

    kind: ProviderKind
    api_key: SecretStr
    base_url: Optional[str] = None
    model: str = Field(..., min_length=1)
    temperature: float = Field(..., ge=0.0, le=2.0)
    max_output_tokens: Optional[int] = Field(default=None, gt=0)
    extra_body: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific request fields merged into the body"
    )
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    adaptive_timeout: bool = Field(
        default=False,
        description="Size each call's deadline by input length"
    )


def _config_for(kind: ProviderKind, settings: Settings, llm: LLMSettings) -> ProviderConfig:
    """Bind one provider. Raises ValidationError when its key is missing."""
    if kind == ProviderKind.KIMI:
        kimi = settings.kimi
        return ProviderConfig(
            kind=kind,
            api_key=kimi.api_key,
            base_url=kimi.base_url,
            model=kimi.model,
            temperature=kimi.temperature,
            extra_body={"chat_template_kwargs": {"thinking": kimi.thinking}},
            timeout_seconds=llm.timeout_seconds,
            adaptive_timeout=llm.adaptive_timeout,
        )
    elif kind == ProviderKind.FIREWORKS:
        fireworks = settings.fireworks
        return ProviderConfig(
            kind=kind,
            api_key=fireworks.api_key,
            base_url=fireworks.base_url,
            model=fireworks.model,
            temperature=fireworks.temperature,
            timeout_seconds=llm.timeout_seconds,
            adaptive_timeout=llm.adaptive_timeout,
        )
    elif kind == ProviderKind.GEMINI:
        gemini = settings.gemini
        return ProviderConfig(
            kind=kind,
            api_key=gemini.api_key,
            model=gemini.model_name,
            temperature=gemini.temperature,
            max_output_tokens=gemini.max_tokens,
            timeout_seconds=llm.timeout_seconds,
            adaptive_timeout=llm.adaptive_timeout,
        )
    raise ValueError(f"Unknown provider: {kind}")


def build_provider_config(
    kind: Optional[ProviderKind] = None,
    settings: Optional[Settings] = None,
) -> ProviderConfig:
    """
    Resolve a provider into its bound configuration.

    When the provider comes from LLM_PROVIDER and is kimi or fireworks but
    has no API key, the other one is used if its key is set
    (LLM_KEY_FALLBACK=false turns this off). An explicit kind never falls
    back.

    Args:
        kind: Provider to use. Defaults to LLM_PROVIDER from settings.
        settings: Settings to read from. Defaults to get_settings().

    Raises:
        ProviderConfigError: Unknown provider or missing credentials
    """
    settings = settings or get_settings()

    try:
        llm = settings.llm
        requested = ProviderKind(kind) if kind is not None else llm.provider
    except (ValidationError, ValueError) as e:
        logger.error("provider_config_invalid", provider=str(kind), error=str(e))
        raise ProviderConfigError(PROVIDER_CONFIG_ERROR_MESSAGE) from e

    candidates = [requested]
    if kind is None and llm.key_fallback and requested in KEY_FALLBACK_ORDER:
        candidates += [k for k in KEY_FALLBACK_ORDER if k != requested]

    last_error: Optional[Exception] = None
    for candidate in candidates:
        try:
            config = _config_for(candidate, settings, llm)
        except (ValidationError, ValueError) as e:
            last_error = e
            continue

        if candidate != requested:
            logger.warning(
                "provider_fallback",
                requested=requested.value,
                provider=candidate.value,
            )
        return config

    logger.error("provider_config_invalid", provider=requested.value, error=str(last_error))
    raise ProviderConfigError(PROVIDER_CONFIG_ERROR_MESSAGE) from last_error
