"""
Parser Agent

Turns user input into validated transactions and/or account records.

CRITICAL BOUNDARIES:
- CAN: Classify input, build prompts, call the model, validate its output
- CANNOT: Persist anything (the user reviews every result first)
- CANNOT: Raise past its entry points - every outcome is a tagged result

FLOW (text):
1. Empty / out-of-domain input is answered immediately, no LLM call
2. Bank notifications are stripped of balance/limit noise
3. System prompt + user turn are built
4. Gateway call -> extract -> validate, at most twice

Image input skips step 2 (pixels can't be regex-scrubbed) but goes
through the same validator and retry policy.

A parse whose last attempt timed out reports the deadline it waited for
instead of the generic prefixed error.
"""

from datetime import date
from typing import Any, Callable, Optional, Sequence, TypeVar, Union

import structlog

from moneybook.agents.retry import run_with_retry
from moneybook.errors import MoneybookError
from moneybook.models.account import Account
from moneybook.models.parsing import (
    LLMCategory,
    ParseFailure,
    ParseResponse,
    TransactionParseResult,
    UnifiedParseResponse,
)
from moneybook.preprocessing import (
    OOD_ERROR_MESSAGE,
    is_bank_message,
    is_financial_input,
    preprocess_bank_message,
)
from moneybook.prompts import (
    DEFAULT_IMAGE_INSTRUCTION,
    DEFAULT_UNIFIED_IMAGE_INSTRUCTION,
    build_image_user_content,
    build_system_prompt,
    build_unified_system_prompt,
    build_user_prompt,
)
from moneybook.services.llm import (
    LLMGateway,
    LLMTimeoutError,
    UserContent,
    image_timeout_seconds,
    text_timeout_seconds,
    timeout_error_message,
)
from moneybook.validation import (
    RegexResponseExtractor,
    ResponseExtractor,
    ResponseFormatError,
    load_json,
    parse_unified_response,
    validate_transactions,
)

logger = structlog.get_logger(__name__)

TEXT_FAILURE_PREFIX = "파싱 실패"
IMAGE_FAILURE_PREFIX = "이미지 파싱 실패"

EMPTY_INPUT_MESSAGE = "입력이 비어 있습니다."
EMPTY_IMAGE_MESSAGE = "이미지가 비어 있습니다."
EMPTY_RESULT_MESSAGE = "파싱 결과가 비어 있습니다."
GENERIC_ERROR_MESSAGE = "AI 서버 요청 중 오류가 발생했습니다."

R = TypeVar("R")


def user_facing_message(error: BaseException) -> str:
    """
    Message safe to show in the UI.

    Our own exceptions carry user-facing text. Anything else (SDK/transport
    errors) may contain URLs or provider payloads and is replaced.
    """
    if isinstance(error, MoneybookError) and str(error):
        return str(error)
    return GENERIC_ERROR_MESSAGE


def _as_transaction_result(data: Any) -> TransactionParseResult:
    transactions = validate_transactions(data)
    if not transactions:
        raise ResponseFormatError(EMPTY_RESULT_MESSAGE)
    return TransactionParseResult(transactions=transactions)


class ParserAgent:
    """
    Entry points of the parsing pipeline.

    Stateless apart from its collaborators: concurrent calls share nothing
    mutable.
    """

    def __init__(
        self,
        gateway: LLMGateway,
        today: Optional[Callable[[], date]] = None,
        transaction_extractor: Optional[ResponseExtractor] = None,
        unified_extractor: Optional[ResponseExtractor] = None,
    ):
        """
        Args:
            gateway: LLM gateway bound to one provider
            today: Clock for resolving relative dates (defaults to date.today)
            transaction_extractor: Extractor for array replies
            unified_extractor: Extractor for object replies
        """
        self._gateway = gateway
        self._today = today or date.today
        self._transaction_extractor = transaction_extractor or RegexResponseExtractor()
        self._unified_extractor = unified_extractor or RegexResponseExtractor(expect_object=True)

    def _today_iso(self, today: Optional[date]) -> str:
        return (today or self._today()).isoformat()

    @staticmethod
    def _screen_text(text: str) -> Optional[ParseFailure]:
        """Answer empty and off-topic input without calling the model."""
        if not text.strip():
            return ParseFailure(error=EMPTY_INPUT_MESSAGE)
        if not is_financial_input(text):
            logger.info("input_out_of_domain", input_length=len(text))
            return ParseFailure(error=OOD_ERROR_MESSAGE)
        return None

    @staticmethod
    def _prepare_text(text: str) -> str:
        if is_bank_message(text):
            return preprocess_bank_message(text)
        return text

    def _deadline(self, text: str, is_image: bool) -> Optional[float]:
        """Length-sized deadline, or None to keep the gateway default."""
        if not self._gateway.config.adaptive_timeout:
            return None
        return image_timeout_seconds(text) if is_image else text_timeout_seconds(text)

    async def _run(
        self,
        system_prompt: str,
        user_content: UserContent,
        extractor: ResponseExtractor,
        interpret: Callable[[Any], R],
        is_image: bool,
        timeout_seconds: Optional[float] = None,
    ) -> Union[R, ParseFailure]:
        """Attempt loop plus conversion of the final error to a ParseFailure."""
        failure_prefix = IMAGE_FAILURE_PREFIX if is_image else TEXT_FAILURE_PREFIX

        async def attempt() -> R:
            raw = await self._gateway.complete(system_prompt, user_content, timeout_seconds)
            return interpret(load_json(extractor.extract(raw)))

        try:
            return await run_with_retry(attempt)
        except LLMTimeoutError as e:
            logger.warning(
                "parse_timed_out",
                provider=self._gateway.config.kind.value,
                timeout_seconds=e.timeout_seconds,
            )
            message = timeout_error_message(e.timeout_seconds, is_image)
            return ParseFailure(error=message or f"{failure_prefix}: {user_facing_message(e)}")
        except Exception as e:
            if not isinstance(e, MoneybookError):
                logger.error(
                    "parse_transport_error",
                    provider=self._gateway.config.kind.value,
                    error_type=type(e).__name__,
                    error=str(e),
                )
            return ParseFailure(error=f"{failure_prefix}: {user_facing_message(e)}")

    # -------------------------------------------------------------------------
    # Transaction-only entry points
    # -------------------------------------------------------------------------

    async def parse_transaction_text(
        self,
        text: str,
        categories: Sequence[LLMCategory],
        today: Optional[date] = None,
    ) -> ParseResponse:
        """
        Parse free text into transactions.

        Returns:
            TransactionParseResult, or ParseFailure with a displayable error
        """
        rejected = self._screen_text(text)
        if rejected:
            return rejected

        system_prompt = build_system_prompt(categories, self._today_iso(today))
        user_prompt = build_user_prompt(self._prepare_text(text))

        return await self._run(
            system_prompt,
            user_prompt,
            self._transaction_extractor,
            _as_transaction_result,
            is_image=False,
            timeout_seconds=self._deadline(text, is_image=False),
        )

    async def parse_transaction_image(
        self,
        image_base64: str,
        mime_type: str,
        text: str,
        categories: Sequence[LLMCategory],
        today: Optional[date] = None,
    ) -> ParseResponse:
        """Parse a receipt/notification screenshot into transactions."""
        if not image_base64:
            return ParseFailure(error=EMPTY_IMAGE_MESSAGE)

        system_prompt = build_system_prompt(categories, self._today_iso(today))
        user_content = build_image_user_content(
            image_base64, mime_type, text, DEFAULT_IMAGE_INSTRUCTION
        )

        return await self._run(
            system_prompt,
            user_content,
            self._transaction_extractor,
            _as_transaction_result,
            is_image=True,
            timeout_seconds=self._deadline(text, is_image=True),
        )

    # -------------------------------------------------------------------------
    # Unified (transaction + account) entry points
    # -------------------------------------------------------------------------

    async def parse_unified_text(
        self,
        text: str,
        categories: Sequence[LLMCategory],
        existing_accounts: Sequence[Account] = (),
        today: Optional[date] = None,
    ) -> UnifiedParseResponse:
        """
        Parse free text into transactions and/or account updates.

        Returns:
            UnifiedParseResult, or ParseFailure with a displayable error
        """
        rejected = self._screen_text(text)
        if rejected:
            return rejected

        system_prompt = build_unified_system_prompt(
            categories, self._today_iso(today), existing_accounts
        )
        user_prompt = build_user_prompt(self._prepare_text(text))

        return await self._run(
            system_prompt,
            user_prompt,
            self._unified_extractor,
            parse_unified_response,
            is_image=False,
            timeout_seconds=self._deadline(text, is_image=False),
        )

    async def parse_unified_image(
        self,
        image_base64: str,
        mime_type: str,
        text: str,
        categories: Sequence[LLMCategory],
        existing_accounts: Sequence[Account] = (),
        today: Optional[date] = None,
    ) -> UnifiedParseResponse:
        """Parse an image into transactions and/or account updates."""
        if not image_base64:
            return ParseFailure(error=EMPTY_IMAGE_MESSAGE)

        system_prompt = build_unified_system_prompt(
            categories, self._today_iso(today), existing_accounts
        )
        user_content = build_image_user_content(
            image_base64, mime_type, text, DEFAULT_UNIFIED_IMAGE_INSTRUCTION
        )

        return await self._run(
            system_prompt,
            user_content,
            self._unified_extractor,
            parse_unified_response,
            is_image=True,
            timeout_seconds=self._deadline(text, is_image=True),
        )
