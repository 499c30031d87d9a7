"""
Concrete Completion Clients

- OpenAICompatibleClient: Kimi and Fireworks both expose the OpenAI
  chat-completions API, so one client covers them (AsyncOpenAI + base_url)
- GeminiClient: Google Generative AI

SDK clients are created lazily on first use so that building a gateway
never opens a connection.
"""

import base64
import binascii
from typing import Any, Optional, Union

import google.generativeai as genai
from openai import AsyncOpenAI

from moneybook.config import ProviderKind
from moneybook.services.llm.interface import (
    CompletionClient,
    LLMError,
    ProviderConfigError,
    UserContent,
)
from moneybook.services.llm.providers import (
    PROVIDER_CONFIG_ERROR_MESSAGE,
    ProviderConfig,
)


class OpenAICompatibleClient(CompletionClient):
    """Chat-completions client for OpenAI-compatible endpoints."""

    def __init__(self, config: ProviderConfig):
        self._config = config
        self._client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the SDK client."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._config.api_key.get_secret_value(),
                base_url=self._config.base_url,
            )
        return self._client

    async def complete(
        self,
        system_prompt: str,
        user_content: UserContent,
    ) -> Optional[str]:
        response = await self._get_client().chat.completions.create(
            model=self._config.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            temperature=self._config.temperature,
            extra_body=self._config.extra_body or None,
        )

        if not response.choices:
            return None
        return response.choices[0].message.content


class GeminiClient(CompletionClient):
    """
    Gemini client.

    The system prompt changes per request, so a GenerativeModel is built
    per call with it as system_instruction.
    """

    def __init__(self, config: ProviderConfig):
        self._config = config
        self._configured = False

    def _configure_genai(self) -> None:
        """Configure Google Generative AI."""
        if not self._configured:
            genai.configure(api_key=self._config.api_key.get_secret_value())
            self._configured = True

    @staticmethod
    def _image_part(url: str) -> dict[str, Any]:
        """Turn a data URL into an inline Gemini blob."""
        if not url.startswith("data:") or "," not in url:
            raise LLMError("이미지 데이터 형식이 올바르지 않습니다.")

        header, data = url.split(",", 1)
        mime_type = header[len("data:"):].split(";")[0]
        try:
            return {"mime_type": mime_type, "data": base64.b64decode(data)}
        except (binascii.Error, ValueError) as e:
            raise LLMError("이미지 데이터 형식이 올바르지 않습니다.") from e

    def _to_gemini_content(self, user_content: UserContent) -> Union[str, list]:
        if isinstance(user_content, str):
            return user_content

        parts: list = []
        for part in user_content:
            if part.get("type") == "text":
                parts.append(part["text"])
            elif part.get("type") == "image_url":
                parts.append(self._image_part(part["image_url"]["url"]))
        return parts

    async def complete(
        self,
        system_prompt: str,
        user_content: UserContent,
    ) -> Optional[str]:
        self._configure_genai()

        generation_config: dict[str, Any] = {"temperature": self._config.temperature}
        if self._config.max_output_tokens:
            generation_config["max_output_tokens"] = self._config.max_output_tokens

        model = genai.GenerativeModel(
            model_name=self._config.model,
            system_instruction=system_prompt,
            generation_config=generation_config,
        )
        response = await model.generate_content_async(
            self._to_gemini_content(user_content)
        )

        # .text raises ValueError when the candidate was blocked or empty
        try:
            return response.text
        except ValueError:
            return None


def create_completion_client(config: ProviderConfig) -> CompletionClient:
    """Pick the client implementation for a provider config."""
    if config.kind in (ProviderKind.KIMI, ProviderKind.FIREWORKS):
        return OpenAICompatibleClient(config)
    elif config.kind == ProviderKind.GEMINI:
        return GeminiClient(config)

    raise ProviderConfigError(PROVIDER_CONFIG_ERROR_MESSAGE)
