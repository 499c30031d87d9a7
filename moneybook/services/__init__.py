"""Services package."""

from moneybook.services.llm import (
    CompletionClient,
    EmptyResponseError,
    LLMError,
    LLMGateway,
    LLMTimeoutError,
    ProviderConfig,
    ProviderConfigError,
    build_provider_config,
)
from moneybook.services.storage import (
    AccountStore,
    AuditStorageInterface,
    CategorySource,
    InMemoryAccountStore,
    InMemoryAuditStorage,
    InMemoryCategorySource,
    NotFoundError,
    StorageError,
)

__all__ = [
    # LLM services
    "CompletionClient",
    "EmptyResponseError",
    "LLMError",
    "LLMGateway",
    "LLMTimeoutError",
    "ProviderConfig",
    "ProviderConfigError",
    "build_provider_config",
    # Storage services
    "AccountStore",
    "AuditStorageInterface",
    "CategorySource",
    "InMemoryAccountStore",
    "InMemoryAuditStorage",
    "InMemoryCategorySource",
    "NotFoundError",
    "StorageError",
]
