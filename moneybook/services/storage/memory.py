"""
In-Memory Storage

Dictionary-backed implementations of the storage interfaces, for tests
and local runs. Not shared between processes and not persistent.
"""

from typing import Optional
from uuid import UUID, uuid4

from moneybook.models.account import Account, AccountBatchItem, MatchAction
from moneybook.models.audit import AuditEvent
from moneybook.models.parsing import DEFAULT_CATEGORIES, LLMCategory
from moneybook.services.storage.interface import (
    AccountStore,
    AuditStorageInterface,
    CategorySource,
    NotFoundError,
)


class InMemoryCategorySource(CategorySource):
    """Categories keyed by user id."""

    def __init__(
        self,
        categories: Optional[dict[str, list[LLMCategory]]] = None,
        seed_defaults: bool = False,
    ):
        """
        Args:
            categories: Initial categories per user
            seed_defaults: Give unknown users DEFAULT_CATEGORIES
        """
        self._categories = {k: list(v) for k, v in (categories or {}).items()}
        self._seed_defaults = seed_defaults

    def set_categories(self, user_id: str, categories: list[LLMCategory]) -> None:
        self._categories[user_id] = list(categories)

    async def list_categories(self, user_id: str) -> list[LLMCategory]:
        if user_id not in self._categories and self._seed_defaults:
            return list(DEFAULT_CATEGORIES)
        return list(self._categories.get(user_id, []))


class InMemoryAccountStore(AccountStore):
    """Accounts keyed by id, with all-or-nothing batch upserts."""

    def __init__(self, accounts: Optional[list[Account]] = None):
        self._accounts: dict[str, Account] = {a.id: a for a in accounts or []}

    def get(self, account_id: str) -> Optional[Account]:
        return self._accounts.get(account_id)

    async def list_active_accounts(self, user_id: str) -> list[Account]:
        return [
            a for a in self._accounts.values()
            if a.user_id == user_id and a.is_active
        ]

    async def upsert_parsed_accounts(
        self,
        user_id: str,
        items: list[AccountBatchItem],
    ) -> int:
        # Stage on a copy so a failing item leaves nothing written.
        staged = dict(self._accounts)

        for item in items:
            if item.action == MatchAction.UPDATE:
                current = staged.get(item.account_id)
                if current is None or current.user_id != user_id:
                    raise NotFoundError("수정할 계정을 찾을 수 없습니다.")
                staged[current.id] = current.model_copy(update={
                    "name": item.name,
                    "sub_type": item.sub_type,
                    "icon": item.icon,
                    "balance": item.balance,
                })
            else:
                account = Account(
                    id=str(uuid4()),
                    user_id=user_id,
                    name=item.name,
                    type=item.type,
                    sub_type=item.sub_type,
                    icon=item.icon,
                    balance=item.balance,
                )
                staged[account.id] = account

        self._accounts = staged
        return len(items)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self.events if e.correlation_id == correlation_id]
