"""
Audit Logger

DESIGN DECISION: Every parse request and every account commit is logged.
This provides:
1. Traceability from input to saved records
2. Debugging capability when a provider misbehaves
3. A history of what the user confirmed

The audit logger:
- Is async so persistence never blocks the parse flow
- Gracefully handles failures (a broken audit store never fails a parse)
- Supports correlation IDs to trace the events of one request
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from moneybook.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from moneybook.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (always)
    2. An AuditStorageInterface backend (when configured)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("moneybook.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_parse_requested(
        self,
        user_id: str,
        source: str,
        input_length: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.parse_requested(
            user_id=user_id,
            source=source,
            input_length=input_length,
            correlation_id=correlation_id,
        ))

    async def log_input_rejected(
        self,
        user_id: str,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        """Log input turned away before any LLM call."""
        await self.log(AuditEventBuilder.input_rejected(
            user_id=user_id,
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_bank_message_normalized(
        self,
        user_id: str,
        original_length: int,
        normalized_length: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.bank_message_normalized(
            user_id=user_id,
            original_length=original_length,
            normalized_length=normalized_length,
            correlation_id=correlation_id,
        ))

    async def log_parse_succeeded(
        self,
        user_id: str,
        intent: str,
        transaction_count: int,
        account_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.parse_succeeded(
            user_id=user_id,
            intent=intent,
            transaction_count=transaction_count,
            account_count=account_count,
            correlation_id=correlation_id,
        ))

    async def log_parse_failed(
        self,
        user_id: str,
        source: str,
        error: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.parse_failed(
            user_id=user_id,
            source=source,
            error=error,
            correlation_id=correlation_id,
        ))

    async def log_accounts_reconciled(
        self,
        user_id: str,
        create_count: int,
        update_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.accounts_reconciled(
            user_id=user_id,
            create_count=create_count,
            update_count=update_count,
            correlation_id=correlation_id,
        ))

    async def log_accounts_saved(
        self,
        user_id: str,
        count: int,
        account_ids: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log a committed account batch."""
        await self.log(AuditEventBuilder.accounts_saved(
            user_id=user_id,
            count=count,
            account_ids=account_ids,
            correlation_id=correlation_id,
        ))

    async def log_save_failed(
        self,
        user_id: str,
        error: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.save_failed(
            user_id=user_id,
            error=error,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an unexpected error."""
        await self.log(AuditEventBuilder.system_error(
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (one parse, one commit) and
    pass it through all subsequent operations.
    """
    return uuid4()
