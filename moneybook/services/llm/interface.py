"""
Completion Client Interface

DESIGN DECISION: The gateway talks to providers through one tiny interface.
This allows us to:
1. Add a provider without touching the parser
2. Use a scripted fake in tests (no network, call counting)
3. Keep provider SDK quirks inside one class each

A client performs exactly ONE network round trip per call and never
retries. Retrying is the parser's job.
"""

from abc import ABC, abstractmethod
from typing import Optional, Union

from moneybook.errors import MoneybookError
from moneybook.prompts.builder import ContentPart

# A user turn is plain text or a list of content parts (image + text).
UserContent = Union[str, list[ContentPart]]


class LLMError(MoneybookError):
    """Base exception for completion failures we raise ourselves."""
    pass


class EmptyResponseError(LLMError):
    """The provider answered but without any text content."""
    pass


class LLMTimeoutError(LLMError):
    """The provider did not answer within the configured deadline."""

    def __init__(self, message: str, timeout_seconds: Optional[float] = None):
        self.timeout_seconds = timeout_seconds
        super().__init__(message)


class ProviderConfigError(LLMError):
    """The selected provider is unknown or missing credentials."""
    pass


class CompletionClient(ABC):
    """
    Abstract completion provider.

    Implementations translate (system prompt, user content) into their
    SDK's request shape and return the first choice's text.
    """

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_content: UserContent,
    ) -> Optional[str]:
        """
        Issue one completion request.

        Args:
            system_prompt: Full system prompt
            user_content: Text, or content parts for vision requests

        Returns:
            The raw text of the first choice, or None if there was none

        Raises:
            Whatever the underlying SDK raises on transport errors
        """
        pass
