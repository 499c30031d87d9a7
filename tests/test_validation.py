"""
Tests for JSON extraction and model output validation.

Validation is the last gate before the user sees anything, so the error
messages (item index + field) are asserted exactly.
"""

import json

import pytest

from moneybook.models.parsing import AccountSubType, AccountType, ParseIntent, TransactionType
from moneybook.validation import (
    InputRejectedError,
    RegexResponseExtractor,
    ResponseFormatError,
    ResponseValidationError,
    extract_json,
    load_json,
    parse_unified_response,
    validate_accounts,
    validate_transactions,
)


def _transaction(**overrides):
    item = {
        "date": "2025-06-01",
        "type": "expense",
        "category": "식비",
        "description": "김치찌개",
        "amount": 9000,
    }
    item.update(overrides)
    return item


def _account(**overrides):
    item = {
        "name": "카카오뱅크",
        "type": "asset",
        "subType": "bank",
        "icon": "🏦",
        "balance": 1_500_000,
    }
    item.update(overrides)
    return item


class TestExtractJson:
    """Tests for best-effort JSON extraction."""

    def test_fenced_block_wins(self):
        text = '설명입니다 [1]\n```json\n[{"a": 1}]\n```\n끝'
        assert extract_json(text) == '[{"a": 1}]'

    def test_bare_fence(self):
        assert extract_json('```\n{"a": 1}\n```', expect_object=True) == '{"a": 1}'

    def test_array_in_prose(self):
        assert extract_json('결과는 다음과 같습니다: [{"a": 1}] 입니다') == '[{"a": 1}]'

    def test_object_preferred_when_expected(self):
        text = '답: {"intent": "transaction", "transactions": [], "accounts": []}'
        assert extract_json(text, expect_object=True).startswith("{")

    def test_array_mode_ignores_objects(self):
        text = '{"intent": "transaction", "transactions": [1]}'
        assert extract_json(text) == "[1]"

    def test_falls_back_to_trimmed_text(self):
        assert extract_json("  죄송합니다  ") == "죄송합니다"

    def test_extract_then_load_recovers_value(self):
        """Any value survives being wrapped in a fence with prose around it."""
        value = [_transaction(), _transaction(amount=4500, description="커피")]
        wrapped = f"여기 있습니다!\n```json\n{json.dumps(value, ensure_ascii=False)}\n```"
        assert load_json(RegexResponseExtractor().extract(wrapped)) == value

    def test_load_json_failure_is_format_error(self):
        with pytest.raises(ResponseFormatError, match="JSON으로 해석할 수 없습니다"):
            load_json("죄송합니다")


class TestValidateTransactions:
    """Tests for transaction validation and coercion."""

    def test_valid_items(self):
        result = validate_transactions([_transaction(), _transaction(amount=4500)])
        assert len(result) == 2
        assert result[0].type == TransactionType.EXPENSE
        assert result[1].amount == 4500

    def test_empty_list_is_valid(self):
        assert validate_transactions([]) == []

    def test_not_a_list(self):
        with pytest.raises(ResponseFormatError, match="형식을 인식할 수 없습니다"):
            validate_transactions({"date": "2025-06-01"})

    def test_missing_field_names_item_and_field(self):
        data = [_transaction(), _transaction(description="  ")]
        with pytest.raises(ResponseValidationError) as exc_info:
            validate_transactions(data)
        assert str(exc_info.value) == "거래 항목 2에 필수 필드가 누락되었습니다: description"
        assert exc_info.value.item_index == 2
        assert exc_info.value.field == "description"

    def test_invalid_type(self):
        with pytest.raises(ResponseValidationError, match="거래 항목 1의 type이 유효하지 않습니다: transfer"):
            validate_transactions([_transaction(type="transfer")])

    def test_unhashable_type_is_invalid(self):
        with pytest.raises(ResponseValidationError, match="type이 유효하지 않습니다"):
            validate_transactions([_transaction(type=["expense"])])

    @pytest.mark.parametrize("amount", [0, -500, "9000", True, 0.4])
    def test_invalid_amount(self, amount):
        with pytest.raises(ResponseValidationError, match="거래 항목 1의 금액이 유효하지 않습니다"):
            validate_transactions([_transaction(amount=amount)])

    def test_amount_is_rounded(self):
        assert validate_transactions([_transaction(amount=4500.6)])[0].amount == 4501

    @pytest.mark.parametrize("amount, expected", [(2.5, 3), (0.5, 1), (4500.5, 4501)])
    def test_halves_round_up(self, amount, expected):
        assert validate_transactions([_transaction(amount=amount)])[0].amount == expected

    def test_unpadded_date_is_normalized(self):
        assert validate_transactions([_transaction(date="2025-6-1")])[0].date == "2025-06-01"

    @pytest.mark.parametrize("date", ["2025-02-30", "06/01", "어제"])
    def test_invalid_date(self, date):
        with pytest.raises(ResponseValidationError, match="날짜가 유효하지 않습니다"):
            validate_transactions([_transaction(date=date)])

    def test_recurring_with_day(self):
        item = _transaction(type="income", category="급여", isRecurring=True, dayOfMonth=25)
        parsed = validate_transactions([item])[0]
        assert parsed.is_recurring is True
        assert parsed.day_of_month == 25

    def test_out_of_range_day_is_dropped(self):
        parsed = validate_transactions([_transaction(isRecurring=True, dayOfMonth=40)])[0]
        assert parsed.is_recurring is True
        assert parsed.day_of_month is None

    def test_day_ignored_when_not_recurring(self):
        parsed = validate_transactions([_transaction(isRecurring=False, dayOfMonth=5)])[0]
        assert not parsed.is_recurring
        assert parsed.day_of_month is None

    def test_suggested_category_kept_when_present(self):
        parsed = validate_transactions([
            _transaction(category="기타 지출", suggestedCategory=" 반려동물 ")
        ])[0]
        assert parsed.suggested_category == "반려동물"

    def test_blank_suggested_category_dropped(self):
        parsed = validate_transactions([_transaction(suggestedCategory="")])[0]
        assert parsed.suggested_category is None


class TestValidateAccounts:
    """Tests for account validation and coercion."""

    def test_valid_account(self):
        parsed = validate_accounts([_account()])[0]
        assert parsed.name == "카카오뱅크"
        assert parsed.type == AccountType.ASSET
        assert parsed.sub_type == AccountSubType.BANK
        assert parsed.balance == 1_500_000

    def test_negative_balance_becomes_magnitude(self):
        parsed = validate_accounts([_account(type="debt", subType="credit_card", balance=-450000.4)])[0]
        assert parsed.balance == 450000

    def test_long_icon_and_name_accepted(self):
        parsed = validate_accounts([_account(icon="💳 credit card icon", name="신한카드 " * 30)])[0]
        assert parsed.icon == "💳 credit card icon"
        assert parsed.name.startswith("신한카드")

    def test_half_balance_rounds_up(self):
        assert validate_accounts([_account(balance=-1000.5)])[0].balance == 1001

    def test_icon_defaults(self):
        item = _account()
        del item["icon"]
        assert validate_accounts([item])[0].icon == "🏦"

    def test_missing_balance(self):
        item = _account()
        del item["balance"]
        with pytest.raises(ResponseValidationError, match="계정 항목 1에 필수 필드가 누락되었습니다: balance"):
            validate_accounts([item])

    def test_invalid_sub_type(self):
        with pytest.raises(ResponseValidationError, match="subType이 유효하지 않습니다: wallet"):
            validate_accounts([_account(subType="wallet")])

    def test_non_numeric_balance(self):
        with pytest.raises(ResponseValidationError, match="잔액이 유효하지 않습니다"):
            validate_accounts([_account(balance="150만")])


class TestParseUnifiedResponse:
    """Tests for interpreting unified replies."""

    def test_transaction_intent(self):
        result = parse_unified_response({
            "intent": "transaction",
            "transactions": [_transaction()],
            "accounts": [],
        })
        assert result.success is True
        assert result.intent == ParseIntent.TRANSACTION
        assert len(result.transactions) == 1
        assert result.accounts == []

    def test_account_intent(self):
        result = parse_unified_response({"intent": "account", "accounts": [_account()]})
        assert result.intent == ParseIntent.ACCOUNT
        assert result.transactions == []
        assert len(result.accounts) == 1

    def test_mixed_input_fills_both(self):
        result = parse_unified_response({
            "intent": "transaction",
            "transactions": [_transaction()],
            "accounts": [_account()],
        })
        assert len(result.transactions) == 1
        assert len(result.accounts) == 1

    def test_unknown_intent_defaults_to_transaction(self):
        result = parse_unified_response({"intent": "???", "transactions": [_transaction()]})
        assert result.intent == ParseIntent.TRANSACTION

    def test_bare_array_is_transactions(self):
        result = parse_unified_response([_transaction()])
        assert result.intent == ParseIntent.TRANSACTION
        assert len(result.transactions) == 1

    def test_rejected_reply(self):
        with pytest.raises(InputRejectedError, match="가계부와 관련 없는 입력입니다."):
            parse_unified_response({"rejected": True, "reason": "가계부와 관련 없는 입력입니다."})

    def test_rejected_without_reason(self):
        with pytest.raises(InputRejectedError, match="가계부와 관련된 내용을 입력해 주세요."):
            parse_unified_response({"rejected": True})

    def test_empty_result(self):
        with pytest.raises(ResponseFormatError, match="파싱 결과가 비어 있습니다."):
            parse_unified_response({"intent": "transaction", "transactions": [], "accounts": []})

    def test_scalar_is_format_error(self):
        with pytest.raises(ResponseFormatError):
            parse_unified_response("hello")

    def test_bad_account_fails_whole_reply(self):
        with pytest.raises(ResponseValidationError, match="계정 항목 2"):
            parse_unified_response({
                "intent": "account",
                "accounts": [_account(), _account(type="equity")],
            })


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
