"""
Main Orchestrator for Moneybook Parsing

This module ties the components together and defines the user-scoped
flows:
1. Parse (text/image -> categories & accounts lookup -> LLM parse ->
   reconcile parsed accounts)
2. Commit (user-confirmed account decisions -> account store)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is written without the user confirming it (parse never saves)
- Every request is audited under one correlation id
- Errors reaching the UI are always displayable messages

This is the "glue" that keeps the system correct even when the model
or a store misbehaves.
"""

import asyncio
import math
from typing import Optional
from uuid import UUID

import structlog

from moneybook.agents import (
    EMPTY_IMAGE_MESSAGE,
    EMPTY_INPUT_MESSAGE,
    IMAGE_FAILURE_PREFIX,
    TEXT_FAILURE_PREFIX,
    ParserAgent,
    user_facing_message,
)
from moneybook.audit import AuditLogger, create_correlation_id
from moneybook.config import AppSettings, ProviderKind, Settings, get_settings
from moneybook.errors import MoneybookError
from moneybook.models.account import Account, AccountCommitResult, MatchDecision
from moneybook.models.parsing import (
    DEFAULT_CATEGORIES,
    LLMCategory,
    ParseFailure,
    UnifiedParseResponse,
)
from moneybook.preprocessing import (
    OOD_ERROR_MESSAGE,
    is_bank_message,
    is_financial_input,
    preprocess_bank_message,
)
from moneybook.reconciliation import (
    build_batch_items,
    reconcile_accounts,
    summarize_decisions,
)
from moneybook.services.llm import (
    CompletionClient,
    LLMGateway,
    ProviderConfig,
    build_provider_config,
)
from moneybook.services.storage import (
    AccountStore,
    AuditStorageInterface,
    CategorySource,
    InMemoryAccountStore,
    InMemoryCategorySource,
)

logger = structlog.get_logger(__name__)

UNSUPPORTED_IMAGE_TYPE_MESSAGE = "지원하지 않는 이미지 형식입니다: {mime_type}"
IMAGE_TOO_LARGE_MESSAGE = "이미지 크기가 너무 큽니다. (최대 {max_mb}MB)"


def _decoded_size(image_base64: str) -> int:
    """Size in bytes of the decoded payload, without decoding it."""
    padding = len(image_base64) - len(image_base64.rstrip("="))
    return math.floor(len(image_base64) * 3 / 4) - padding


class ParseFlow:
    """
    Orchestrates parsing for one user at a time.

    Flow:
    1. Screen input (empty / out-of-domain / unsupported image)
    2. Load categories and active accounts concurrently
    3. Unified parse through the ParserAgent
    4. Propose create/update decisions for parsed accounts
    5. Review -> user confirms or edits the decisions (PAUSE)
    6. Commit confirmed decisions as one batch

    The system NEVER auto-saves.
    """

    def __init__(
        self,
        agent: ParserAgent,
        category_source: CategorySource,
        account_store: AccountStore,
        audit_logger: Optional[AuditLogger] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._agent = agent
        self._category_source = category_source
        self._account_store = account_store
        self._audit_logger = audit_logger
        self._app_settings = app_settings or AppSettings()

    async def _load_context(
        self,
        user_id: str,
        correlation_id: UUID,
    ) -> tuple[list[LLMCategory], list[Account]]:
        """Fetch the user's categories and active accounts in parallel."""
        try:
            categories, accounts = await asyncio.gather(
                self._category_source.list_categories(user_id),
                self._account_store.list_active_accounts(user_id),
            )
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_message=str(e),
                    details={"stage": "load_context"},
                    correlation_id=correlation_id,
                )
            raise

        if not categories:
            logger.info("categories_defaulted", user_id=user_id)
            categories = list(DEFAULT_CATEGORIES)

        return categories, accounts

    async def _context_failure(
        self,
        user_id: str,
        source: str,
        prefix: str,
        error: Exception,
        correlation_id: UUID,
    ) -> tuple[UnifiedParseResponse, list[MatchDecision]]:
        """Turn a store failure into a displayable ParseFailure."""
        if not isinstance(error, MoneybookError):
            logger.error(
                "context_load_error",
                user_id=user_id,
                source=source,
                error_type=type(error).__name__,
                error=str(error),
            )
        failure = ParseFailure(error=f"{prefix}: {user_facing_message(error)}")
        return await self._finish(user_id, source, failure, [], correlation_id)

    async def _reject(
        self,
        user_id: str,
        reason: str,
        message: str,
        correlation_id: UUID,
    ) -> tuple[UnifiedParseResponse, list[MatchDecision]]:
        if self._audit_logger:
            await self._audit_logger.log_input_rejected(
                user_id=user_id,
                reason=reason,
                correlation_id=correlation_id,
            )
        return ParseFailure(error=message), []

    async def _finish(
        self,
        user_id: str,
        source: str,
        result: UnifiedParseResponse,
        accounts: list[Account],
        correlation_id: UUID,
    ) -> tuple[UnifiedParseResponse, list[MatchDecision]]:
        """Audit the outcome and reconcile any parsed accounts."""
        if isinstance(result, ParseFailure):
            if self._audit_logger:
                await self._audit_logger.log_parse_failed(
                    user_id=user_id,
                    source=source,
                    error=result.error,
                    correlation_id=correlation_id,
                )
            return result, []

        if self._audit_logger:
            await self._audit_logger.log_parse_succeeded(
                user_id=user_id,
                intent=result.intent.value,
                transaction_count=len(result.transactions),
                account_count=len(result.accounts),
                correlation_id=correlation_id,
            )

        decisions = reconcile_accounts(result.accounts, accounts)

        if decisions and self._audit_logger:
            summary = summarize_decisions(decisions)
            await self._audit_logger.log_accounts_reconciled(
                user_id=user_id,
                create_count=summary["create"],
                update_count=summary["update"],
                correlation_id=correlation_id,
            )

        return result, decisions

    async def parse_input(
        self,
        user_id: str,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[UnifiedParseResponse, list[MatchDecision]]:
        """
        Parse free text for a user.

        Returns:
            (parse_response, match_decisions)

        match_decisions is empty unless accounts were parsed.
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_parse_requested(
                user_id=user_id,
                source="text",
                input_length=len(text),
                correlation_id=correlation_id,
            )

        # Screened here as well as in the agent so no store is touched
        if not text.strip():
            return await self._reject(user_id, "empty", EMPTY_INPUT_MESSAGE, correlation_id)
        if not is_financial_input(text):
            return await self._reject(user_id, "out_of_domain", OOD_ERROR_MESSAGE, correlation_id)

        if is_bank_message(text) and self._audit_logger:
            await self._audit_logger.log_bank_message_normalized(
                user_id=user_id,
                original_length=len(text),
                normalized_length=len(preprocess_bank_message(text)),
                correlation_id=correlation_id,
            )

        try:
            categories, accounts = await self._load_context(user_id, correlation_id)
        except Exception as e:
            return await self._context_failure(
                user_id, "text", TEXT_FAILURE_PREFIX, e, correlation_id
            )

        result = await self._agent.parse_unified_text(text, categories, accounts)

        return await self._finish(user_id, "text", result, accounts, correlation_id)

    async def parse_image_input(
        self,
        user_id: str,
        image_base64: str,
        mime_type: str,
        text: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> tuple[UnifiedParseResponse, list[MatchDecision]]:
        """
        Parse a screenshot or receipt photo for a user.

        Args:
            image_base64: Base64 image payload (no data-URL prefix)
            mime_type: MIME type reported by the upload
            text: Optional instruction typed alongside the image

        Returns:
            (parse_response, match_decisions)
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_parse_requested(
                user_id=user_id,
                source="image",
                input_length=len(image_base64),
                correlation_id=correlation_id,
            )

        if not image_base64:
            return await self._reject(user_id, "empty_image", EMPTY_IMAGE_MESSAGE, correlation_id)

        if mime_type.strip().lower() not in self._app_settings.supported_mime_types_list:
            return await self._reject(
                user_id,
                "unsupported_mime_type",
                UNSUPPORTED_IMAGE_TYPE_MESSAGE.format(mime_type=mime_type),
                correlation_id,
            )

        if _decoded_size(image_base64) > self._app_settings.max_image_size_bytes:
            return await self._reject(
                user_id,
                "image_too_large",
                IMAGE_TOO_LARGE_MESSAGE.format(max_mb=self._app_settings.max_image_size_mb),
                correlation_id,
            )

        try:
            categories, accounts = await self._load_context(user_id, correlation_id)
        except Exception as e:
            return await self._context_failure(
                user_id, "image", IMAGE_FAILURE_PREFIX, e, correlation_id
            )

        result = await self._agent.parse_unified_image(
            image_base64,
            mime_type.strip().lower(),
            text,
            categories,
            accounts,
        )

        return await self._finish(user_id, "image", result, accounts, correlation_id)

    async def commit_accounts(
        self,
        user_id: str,
        decisions: list[MatchDecision],
        correlation_id: Optional[UUID] = None,
    ) -> AccountCommitResult:
        """
        Persist user-confirmed account decisions as one batch.

        Either every item is applied or none is.

        Returns:
            AccountCommitResult with the applied count, or a displayable error
        """
        correlation_id = correlation_id or create_correlation_id()

        if not decisions:
            return AccountCommitResult(success=True, count=0)

        try:
            items = build_batch_items(decisions)
            count = await self._account_store.upsert_parsed_accounts(user_id, items)
        except Exception as e:
            error = user_facing_message(e)
            if not isinstance(e, MoneybookError):
                logger.error(
                    "account_commit_error",
                    user_id=user_id,
                    error_type=type(e).__name__,
                    error=str(e),
                )
            if self._audit_logger:
                await self._audit_logger.log_save_failed(
                    user_id=user_id,
                    error=error,
                    correlation_id=correlation_id,
                )
            return AccountCommitResult(success=False, error=error)

        if self._audit_logger:
            await self._audit_logger.log_accounts_saved(
                user_id=user_id,
                count=count,
                account_ids=[item.account_id for item in items if item.account_id],
                correlation_id=correlation_id,
            )

        return AccountCommitResult(success=True, count=count)


def create_app_components(
    provider: Optional[ProviderKind] = None,
    settings: Optional[Settings] = None,
    category_source: Optional[CategorySource] = None,
    account_store: Optional[AccountStore] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    client: Optional[CompletionClient] = None,
) -> tuple[ParseFlow, ProviderConfig]:
    """
    Factory function to create all application components.

    Args:
        provider: Provider override (defaults to LLM_PROVIDER)
        settings: Settings to read from (defaults to get_settings())
        category_source: Category backend. Defaults to in-memory with
                        DEFAULT_CATEGORIES for every user.
        account_store: Account backend. Defaults to in-memory.
        audit_storage: Audit backend. If None, audit is local-only.
        client: Completion client override (tests)

    Returns:
        (parse_flow, provider_config)

    Raises:
        ProviderConfigError: The provider can't be configured
    """
    settings = settings or get_settings()

    provider_config = build_provider_config(provider, settings)
    gateway = LLMGateway(provider_config, client=client)
    agent = ParserAgent(gateway)

    parse_flow = ParseFlow(
        agent=agent,
        category_source=category_source or InMemoryCategorySource(seed_defaults=True),
        account_store=account_store or InMemoryAccountStore(),
        audit_logger=AuditLogger(audit_storage),
        app_settings=settings.app,
    )

    logger.info(
        "app_components_created",
        provider=provider_config.kind.value,
        model=provider_config.model,
    )

    return parse_flow, provider_config
