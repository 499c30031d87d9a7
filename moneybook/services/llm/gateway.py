"""
LLM Gateway

The single entry point the parser uses to reach a model.

BOUNDARIES:
- ONE round trip per call, never retries
- Returns raw text; extraction and validation happen elsewhere
- Empty content is an error (EmptyResponseError), not an empty string

Timeouts: by default none is imposed here and the transport default
applies. When the caller passes timeout_seconds, or the provider config
carries one, the call is wrapped in asyncio.wait_for and LLMTimeoutError
(carrying the deadline) is raised on expiry.
"""

import asyncio
import time
from typing import Optional

import structlog

from moneybook.services.llm.clients import create_completion_client
from moneybook.services.llm.interface import (
    CompletionClient,
    EmptyResponseError,
    LLMTimeoutError,
    UserContent,
)
from moneybook.services.llm.providers import ProviderConfig
from moneybook.services.llm.timeouts import clamp_timeout

logger = structlog.get_logger(__name__)


class LLMGateway:
    """Provider-agnostic single-call completion interface."""

    def __init__(
        self,
        config: ProviderConfig,
        client: Optional[CompletionClient] = None,
    ):
        """
        Args:
            config: Resolved provider configuration
            client: Client override (tests inject a fake here).
                    If None, one is created from config.
        """
        self._config = config
        self._client = client or create_completion_client(config)

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def complete(
        self,
        system_prompt: str,
        user_content: UserContent,
        timeout_seconds: Optional[float] = None,
    ) -> str:
        """
        Send one chat completion and return its text.

        Args:
            timeout_seconds: Deadline for this call only, clamped to
                             15-120s. Overrides config.timeout_seconds.

        Raises:
            EmptyResponseError: No text came back
            LLMTimeoutError: The deadline passed
            Exception: Transport errors from the SDK, unchanged
        """
        if timeout_seconds is not None:
            timeout_seconds = clamp_timeout(timeout_seconds)
        else:
            timeout_seconds = self._config.timeout_seconds

        started = time.monotonic()
        call = self._client.complete(system_prompt, user_content)

        if timeout_seconds:
            try:
                content = await asyncio.wait_for(call, timeout_seconds)
            except asyncio.TimeoutError:
                raise LLMTimeoutError("LLM 응답 시간 초과", timeout_seconds=timeout_seconds)
        else:
            content = await call

        logger.debug(
            "llm_call_completed",
            provider=self._config.kind.value,
            model=self._config.model,
            elapsed_ms=round((time.monotonic() - started) * 1000),
            has_content=bool(content),
        )

        if not content or not content.strip():
            raise EmptyResponseError("LLM 응답이 비어 있습니다.")

        return content
