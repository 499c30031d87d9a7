"""
Data Models Package

This package contains all Pydantic models used by the parsing core.
Everything the parser returns must conform to these schemas.
"""

from moneybook.models.parsing import (
    DEFAULT_ACCOUNT_ICON,
    DEFAULT_CATEGORIES,
    SUB_TYPE_ICONS,
    AccountSubType,
    AccountType,
    LLMCategory,
    ParsedAccount,
    ParsedTransaction,
    ParseFailure,
    ParseIntent,
    ParseResponse,
    TransactionParseResult,
    TransactionType,
    UnifiedParseResponse,
    UnifiedParseResult,
)
from moneybook.models.account import (
    Account,
    AccountBatchItem,
    AccountCommitResult,
    MatchAction,
    MatchDecision,
)
from moneybook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Parsing models
    "DEFAULT_ACCOUNT_ICON",
    "DEFAULT_CATEGORIES",
    "SUB_TYPE_ICONS",
    "AccountSubType",
    "AccountType",
    "LLMCategory",
    "ParsedAccount",
    "ParsedTransaction",
    "ParseFailure",
    "ParseIntent",
    "ParseResponse",
    "TransactionParseResult",
    "TransactionType",
    "UnifiedParseResponse",
    "UnifiedParseResult",
    # Account models
    "Account",
    "AccountBatchItem",
    "AccountCommitResult",
    "MatchAction",
    "MatchDecision",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
