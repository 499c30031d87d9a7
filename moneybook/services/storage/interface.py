"""
Abstract Storage Interface

DESIGN DECISION: The parsing core never talks to the database directly.
It reads categories and accounts, and hands confirmed account changes
back, through these interfaces. This allows us to:
1. Keep the relational schema and ORM outside this package
2. Use in-memory storage for tests and local runs
3. Leave transactional guarantees to the real store

The interface is intentionally small - just what the parse flow needs.
"""

from abc import ABC, abstractmethod

from moneybook.errors import MoneybookError
from moneybook.models.account import Account, AccountBatchItem
from moneybook.models.audit import AuditEvent
from moneybook.models.parsing import LLMCategory


class StorageError(MoneybookError):
    """Base exception for storage errors."""
    pass


class NotFoundError(StorageError):
    """Requested record does not exist."""
    pass


class CategorySource(ABC):
    """Supplies a user's categories for prompt construction."""

    @abstractmethod
    async def list_categories(self, user_id: str) -> list[LLMCategory]:
        """
        Get the user's full category set.

        Returned verbatim into the prompt; no normalization is applied.
        An empty list means the user has no categories yet.
        """
        pass


class AccountStore(ABC):
    """
    Reads existing accounts and persists confirmed account changes.

    The account list is a snapshot read once per request; concurrent
    edits are the store's problem to resolve on upsert.
    """

    @abstractmethod
    async def list_active_accounts(self, user_id: str) -> list[Account]:
        """Get the user's active accounts."""
        pass

    @abstractmethod
    async def upsert_parsed_accounts(
        self,
        user_id: str,
        items: list[AccountBatchItem],
    ) -> int:
        """
        Apply a batch of creates/updates atomically.

        Args:
            user_id: Owner of the accounts
            items: Reconciled, user-confirmed items

        Returns:
            Number of items applied

        Raises:
            NotFoundError: An update targets an account the user doesn't own
            StorageError: The batch could not be applied (nothing written)
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        Returns:
            True if appended successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id,
    ) -> list[AuditEvent]:
        """Get all events of one request, oldest first."""
        pass
