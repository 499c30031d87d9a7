"""
Account Models

Existing accounts come from the account store; parsed accounts come from
the LLM. A MatchDecision pairs the two and says what should happen on
commit. The decision is only a DEFAULT - the user may flip it before
anything is written.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from moneybook.models.parsing import (
    DEFAULT_ACCOUNT_ICON,
    AccountSubType,
    AccountType,
    ParsedAccount,
)


class MatchAction(str, Enum):
    """What committing a parsed account will do."""
    CREATE = "create"
    UPDATE = "update"


class Account(BaseModel):
    """An account that already exists for the user."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    user_id: Optional[str] = Field(default=None, alias="userId")
    name: str
    type: AccountType
    sub_type: AccountSubType = Field(default=AccountSubType.OTHER, alias="subType")
    icon: str = DEFAULT_ACCOUNT_ICON
    balance: int = 0
    is_active: bool = Field(default=True, alias="isActive")


class MatchDecision(BaseModel):
    """
    Reconciliation result for one parsed account.

    matched_account is None when nothing matched (the account will be
    created). Two decisions may point at the same existing account; no
    deduplication happens here.
    """

    parsed: ParsedAccount
    matched_account: Optional[Account] = None
    action: MatchAction

    @model_validator(mode="after")
    def validate_action_target(self) -> "MatchDecision":
        if self.action == MatchAction.UPDATE and self.matched_account is None:
            raise ValueError("An update decision needs a matched account")
        return self

    def with_action(self, action: MatchAction) -> "MatchDecision":
        """Return a copy with the user's chosen action."""
        return MatchDecision(
            parsed=self.parsed,
            matched_account=self.matched_account,
            action=action,
        )

    def with_parsed(self, parsed: ParsedAccount) -> "MatchDecision":
        """Return a copy carrying the user's edits to the parsed record."""
        return MatchDecision(
            parsed=parsed,
            matched_account=self.matched_account,
            action=self.action,
        )


class AccountBatchItem(BaseModel):
    """One row handed to the account store for a transactional upsert."""

    action: MatchAction
    account_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    type: AccountType
    sub_type: AccountSubType
    icon: str
    balance: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_update_target(self) -> "AccountBatchItem":
        if self.action == MatchAction.UPDATE and not self.account_id:
            raise ValueError("업데이트 대상 계정 ID가 없습니다.")
        return self


class AccountCommitResult(BaseModel):
    """Outcome of committing reconciled accounts."""

    success: bool
    count: int = 0
    error: Optional[str] = None
