"""LLM gateway package."""

from moneybook.services.llm.clients import (
    GeminiClient,
    OpenAICompatibleClient,
    create_completion_client,
)
from moneybook.services.llm.gateway import LLMGateway
from moneybook.services.llm.interface import (
    CompletionClient,
    EmptyResponseError,
    LLMError,
    LLMTimeoutError,
    ProviderConfigError,
    UserContent,
)
from moneybook.services.llm.providers import (
    KEY_FALLBACK_ORDER,
    PROVIDER_CONFIG_ERROR_MESSAGE,
    ProviderConfig,
    build_provider_config,
)
from moneybook.services.llm.timeouts import (
    MAX_TIMEOUT_SECONDS,
    MIN_TIMEOUT_SECONDS,
    image_timeout_seconds,
    text_timeout_seconds,
    timeout_error_message,
)

__all__ = [
    "CompletionClient",
    "EmptyResponseError",
    "GeminiClient",
    "KEY_FALLBACK_ORDER",
    "LLMError",
    "LLMGateway",
    "LLMTimeoutError",
    "MAX_TIMEOUT_SECONDS",
    "MIN_TIMEOUT_SECONDS",
    "OpenAICompatibleClient",
    "PROVIDER_CONFIG_ERROR_MESSAGE",
    "ProviderConfig",
    "ProviderConfigError",
    "UserContent",
    "build_provider_config",
    "create_completion_client",
    "image_timeout_seconds",
    "text_timeout_seconds",
    "timeout_error_message",
]
