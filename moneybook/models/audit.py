"""
Audit Models for the Parsing Pipeline

Every parse request leaves a trail: what came in, whether it was turned
away before reaching the LLM, how it ended, and what the user committed.
This provides:
1. Traceability of each request (correlation ids)
2. Debugging information when the model misbehaves
3. A record of every account create/update the user confirmed

DESIGN DECISION: Audit events never carry raw input text or balances in
`description`. Input is summarized by length; details hold only what is
needed to reconstruct the decision path.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Intake
    PARSE_REQUESTED = "parse_requested"
    INPUT_REJECTED = "input_rejected"
    BANK_MESSAGE_NORMALIZED = "bank_message_normalized"

    # Outcome
    PARSE_SUCCEEDED = "parse_succeeded"
    PARSE_FAILED = "parse_failed"

    # Accounts
    ACCOUNTS_RECONCILED = "accounts_reconciled"
    ACCOUNTS_SAVED = "accounts_saved"
    SAVE_FAILED = "save_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    Append-only: events are never modified after creation.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Who and which request
    user_id: Optional[str] = Field(
        default=None,
        description="User the request belongs to"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one parse request"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.parse_requested(user_id, "text", 42, cid)
        event = AuditEventBuilder.parse_failed(user_id, "text", error, cid)
    """

    @staticmethod
    def parse_requested(
        user_id: str,
        source: str,
        input_length: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARSE_REQUESTED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Parse requested from {source} input",
            details={
                "source": source,
                "input_length": input_length,
            },
            is_user_action=True,
        )

    @staticmethod
    def input_rejected(
        user_id: str,
        reason: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INPUT_REJECTED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Input rejected before LLM call: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def bank_message_normalized(
        user_id: str,
        original_length: int,
        normalized_length: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BANK_MESSAGE_NORMALIZED,
            severity=AuditSeverity.DEBUG,
            user_id=user_id,
            correlation_id=correlation_id,
            description="Bank notification noise stripped",
            details={
                "original_length": original_length,
                "normalized_length": normalized_length,
            },
        )

    @staticmethod
    def parse_succeeded(
        user_id: str,
        intent: str,
        transaction_count: int,
        account_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARSE_SUCCEEDED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=(
                f"Parsed {transaction_count} transaction(s) and "
                f"{account_count} account(s)"
            ),
            details={
                "intent": intent,
                "transaction_count": transaction_count,
                "account_count": account_count,
            },
        )

    @staticmethod
    def parse_failed(
        user_id: str,
        source: str,
        error: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARSE_FAILED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Parsing {source} input failed",
            details={"source": source},
            error_message=error,
        )

    @staticmethod
    def accounts_reconciled(
        user_id: str,
        create_count: int,
        update_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_RECONCILED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=(
                f"Suggested {create_count} create(s) and {update_count} update(s)"
            ),
            details={
                "create_count": create_count,
                "update_count": update_count,
            },
        )

    @staticmethod
    def accounts_saved(
        user_id: str,
        count: int,
        account_ids: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_SAVED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"User saved {count} account record(s)",
            details={"updated_account_ids": account_ids},
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        user_id: str,
        error: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            correlation_id=correlation_id,
            description="Saving account records failed",
            error_message=error,
        )

    @staticmethod
    def system_error(
        error_message: str,
        correlation_id: Optional[UUID] = None,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Unexpected system error",
            details=details or {},
            error_message=error_message,
        )
