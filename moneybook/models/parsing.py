"""
Parsing Data Models

These models define what the parser is allowed to hand back to callers.
Everything the LLM returns is funnelled through them after validation, so
the invariants here are the final word:

1. Transaction amounts are positive whole currency units
2. Types come from a closed set (income/expense, asset/debt)
3. Dates are real calendar dates in YYYY-MM-DD form
4. Account balances are magnitudes; the sign lives in the account type

DESIGN DECISION: The wire format exchanged with the LLM (and with the UI)
uses camelCase keys. The models expose snake_case attributes and accept
and emit the camelCase names through aliases.
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a money movement."""
    INCOME = "income"
    EXPENSE = "expense"


class AccountType(str, Enum):
    """Whether an account adds to or subtracts from net worth."""
    ASSET = "asset"
    DEBT = "debt"


class AccountSubType(str, Enum):
    """Finer account classification, mirrored by the display icon."""
    BANK = "bank"
    CASH = "cash"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    OTHER = "other"


class ParseIntent(str, Enum):
    """
    What a free-text input is mainly about.

    Mixed input still carries a single intent (the dominant one) while
    both result lists may be populated.
    """
    TRANSACTION = "transaction"
    ACCOUNT = "account"


DEFAULT_ACCOUNT_ICON = "🏦"

SUB_TYPE_ICONS: dict[AccountSubType, str] = {
    AccountSubType.BANK: "🏦",
    AccountSubType.CASH: "💵",
    AccountSubType.SAVINGS: "🏧",
    AccountSubType.INVESTMENT: "📈",
    AccountSubType.CREDIT_CARD: "💳",
    AccountSubType.LOAN: "🏠",
    AccountSubType.OTHER: "📦",
}


# =============================================================================
# PROMPT INPUT
# =============================================================================

class LLMCategory(BaseModel):
    """A user's category as shown to the model. Read-only."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: TransactionType


DEFAULT_CATEGORIES: list[LLMCategory] = [
    LLMCategory(name="식비", type=TransactionType.EXPENSE),
    LLMCategory(name="카페/간식", type=TransactionType.EXPENSE),
    LLMCategory(name="교통", type=TransactionType.EXPENSE),
    LLMCategory(name="주거/관리비", type=TransactionType.EXPENSE),
    LLMCategory(name="생활용품", type=TransactionType.EXPENSE),
    LLMCategory(name="의류/미용", type=TransactionType.EXPENSE),
    LLMCategory(name="의료/건강", type=TransactionType.EXPENSE),
    LLMCategory(name="통신", type=TransactionType.EXPENSE),
    LLMCategory(name="여가/취미", type=TransactionType.EXPENSE),
    LLMCategory(name="교육", type=TransactionType.EXPENSE),
    LLMCategory(name="경조사/선물", type=TransactionType.EXPENSE),
    LLMCategory(name="기타 지출", type=TransactionType.EXPENSE),
    LLMCategory(name="급여", type=TransactionType.INCOME),
    LLMCategory(name="용돈/부수입", type=TransactionType.INCOME),
    LLMCategory(name="투자수익", type=TransactionType.INCOME),
    LLMCategory(name="기타 수입", type=TransactionType.INCOME),
]


# =============================================================================
# PARSED RECORDS
# =============================================================================

class ParsedTransaction(BaseModel):
    """
    One recognized income/expense line item.

    Transient: created from one LLM response, reviewed and possibly edited
    by the user, then handed to persistence or discarded.
    """
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    date: str = Field(
        ...,
        description="Transaction date, YYYY-MM-DD"
    )
    type: TransactionType
    category: str = Field(
        ...,
        min_length=1,
        description="Category name, expected to be one from the prompt"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Short label (menu item, merchant, ...)"
    )
    amount: int = Field(
        ...,
        gt=0,
        description="Amount in whole currency units"
    )
    is_recurring: Optional[bool] = Field(default=None, alias="isRecurring")
    day_of_month: Optional[int] = Field(
        default=None,
        ge=1,
        le=31,
        alias="dayOfMonth",
        description="Day the recurring transaction repeats on"
    )
    suggested_category: Optional[str] = Field(
        default=None,
        alias="suggestedCategory",
        description="New category proposed when none of the existing ones fit"
    )
    account_id: Optional[str] = Field(
        default=None,
        alias="accountId",
        description="Linked account, assigned by the caller, never by the LLM"
    )

    @field_validator("date")
    @classmethod
    def validate_calendar_date(cls, v: str) -> str:
        try:
            parsed = datetime.strptime(v, "%Y-%m-%d")
        except ValueError:
            raise ValueError(f"Invalid calendar date: {v}")
        # Zero-padded form, strptime also accepts 2025-6-1
        return parsed.date().isoformat()

    @model_validator(mode="after")
    def validate_recurrence(self) -> "ParsedTransaction":
        if self.day_of_month is not None and not self.is_recurring:
            raise ValueError("day_of_month is only allowed on recurring transactions")
        return self

    def to_wire(self) -> dict:
        """camelCase dict without unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ParsedAccount(BaseModel):
    """One recognized asset/debt balance statement."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    type: AccountType
    sub_type: AccountSubType = Field(..., alias="subType")
    icon: str = Field(default=DEFAULT_ACCOUNT_ICON)
    balance: int = Field(
        ...,
        ge=0,
        description="Absolute balance; debt-ness is carried by type"
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# RESULT ENVELOPES
# =============================================================================

class TransactionParseResult(BaseModel):
    """Successful transaction-only parse."""
    success: Literal[True] = True
    transactions: list[ParsedTransaction]


class UnifiedParseResult(BaseModel):
    """
    Successful unified parse.

    A single input may split into both transactions and account updates.
    """
    success: Literal[True] = True
    intent: ParseIntent
    transactions: list[ParsedTransaction] = Field(default_factory=list)
    accounts: list[ParsedAccount] = Field(default_factory=list)


class ParseFailure(BaseModel):
    """
    Tagged failure.

    Callers branch on `success` instead of catching exceptions.
    `error` is safe to show in the UI as-is.
    """
    success: Literal[False] = False
    error: str


ParseResponse = Union[TransactionParseResult, ParseFailure]
UnifiedParseResponse = Union[UnifiedParseResult, ParseFailure]
