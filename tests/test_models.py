"""
Tests for Moneybook models

Test strategy:
1. Unit tests for individual components (models, validators, prompts)
2. Integration tests for flows (with a scripted provider)
3. No real API calls in tests
"""

import pytest
from pydantic import ValidationError

from moneybook.models import (
    DEFAULT_CATEGORIES,
    AccountBatchItem,
    AccountSubType,
    AccountType,
    LLMCategory,
    MatchAction,
    ParsedAccount,
    ParsedTransaction,
    ParseFailure,
    TransactionType,
    UnifiedParseResult,
)


class TestParsedTransaction:
    """Tests for the transaction model."""

    def test_accepts_wire_names(self):
        txn = ParsedTransaction(
            date="2025-06-25",
            type="income",
            category="급여",
            description="월급",
            amount=3_500_000,
            isRecurring=True,
            dayOfMonth=25,
        )
        assert txn.is_recurring is True
        assert txn.day_of_month == 25

    def test_to_wire_uses_camel_case_and_skips_unset(self):
        txn = ParsedTransaction(
            date="2025-06-01",
            type=TransactionType.EXPENSE,
            category="식비",
            description="김치찌개",
            amount=9000,
        )
        assert txn.to_wire() == {
            "date": "2025-06-01",
            "type": "expense",
            "category": "식비",
            "description": "김치찌개",
            "amount": 9000,
        }

    def test_rejects_non_positive_amount(self):
        with pytest.raises(ValidationError):
            ParsedTransaction(
                date="2025-06-01", type="expense", category="식비",
                description="김치찌개", amount=0,
            )

    def test_rejects_impossible_date(self):
        with pytest.raises(ValidationError, match="Invalid calendar date"):
            ParsedTransaction(
                date="2025-13-01", type="expense", category="식비",
                description="김치찌개", amount=9000,
            )

    def test_unpadded_date_stored_padded(self):
        transaction = ParsedTransaction(
            date="2025-6-1", type="expense", category="식비",
            description="김치찌개", amount=9000,
        )
        assert transaction.date == "2025-06-01"

    def test_day_of_month_requires_recurring(self):
        with pytest.raises(ValidationError, match="recurring"):
            ParsedTransaction(
                date="2025-06-01", type="expense", category="주거/관리비",
                description="월세", amount=500_000, day_of_month=5,
            )


class TestParsedAccount:
    """Tests for the account model."""

    def test_defaults_icon(self):
        account = ParsedAccount(name="현금", type="asset", subType="cash", balance=150_000)
        assert account.icon == "🏦"

    def test_icon_has_no_length_cap(self):
        account = ParsedAccount(name="신한카드", type="debt", subType="credit_card",
                                icon="💳 credit card icon", balance=0)
        assert account.icon == "💳 credit card icon"

    def test_rejects_negative_balance(self):
        with pytest.raises(ValidationError):
            ParsedAccount(name="신한카드", type="debt", subType="credit_card", balance=-1)

    def test_to_wire(self):
        account = ParsedAccount(
            name="신한카드",
            type=AccountType.DEBT,
            sub_type=AccountSubType.CREDIT_CARD,
            icon="💳",
            balance=450_000,
        )
        assert account.to_wire() == {
            "name": "신한카드",
            "type": "debt",
            "subType": "credit_card",
            "icon": "💳",
            "balance": 450_000,
        }


class TestCategories:
    """Tests for category models."""

    def test_category_is_read_only(self):
        category = LLMCategory(name="식비", type="expense")
        with pytest.raises(ValidationError):
            category.name = "외식"

    def test_default_categories_cover_both_types(self):
        types = {c.type for c in DEFAULT_CATEGORIES}
        assert types == {TransactionType.EXPENSE, TransactionType.INCOME}
        names = [c.name for c in DEFAULT_CATEGORIES]
        assert "기타 지출" in names
        assert "기타 수입" in names
        assert len(names) == len(set(names))


class TestResultEnvelopes:
    """Tests for tagged results."""

    def test_failure_tag(self):
        failure = ParseFailure(error="입력이 비어 있습니다.")
        assert failure.success is False

    def test_success_tag(self):
        result = UnifiedParseResult(intent="account")
        assert result.success is True
        assert result.transactions == []
        assert result.accounts == []


class TestAccountBatchItem:
    """Tests for persistence items."""

    def test_update_requires_id(self):
        with pytest.raises(ValidationError, match="업데이트 대상 계정 ID가 없습니다."):
            AccountBatchItem(
                action=MatchAction.UPDATE,
                name="카카오뱅크",
                type="asset",
                sub_type="bank",
                icon="🏦",
                balance=1000,
            )

    def test_create_without_id(self):
        item = AccountBatchItem(
            action=MatchAction.CREATE,
            name="새통장",
            type="asset",
            sub_type="savings",
            icon="🏧",
            balance=0,
        )
        assert item.account_id is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
