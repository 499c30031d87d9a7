"""
Tests for input classification and bank-message normalization.

These run before any LLM call, so they decide whether a request costs
money at all.
"""

import pytest

from moneybook.preprocessing import (
    OOD_ERROR_MESSAGE,
    is_bank_message,
    is_financial_input,
    preprocess_bank_message,
)


class TestIsBankMessage:
    """Tests for notification detection."""

    def test_card_approval_is_bank_message(self):
        assert is_bank_message("[신한카드] 승인 12,000원 스타벅스")

    def test_keyword_on_second_line(self):
        assert is_bank_message("06/01 12:30\n카카오뱅크 출금 5,500원")

    def test_plain_expense_is_not_bank_message(self):
        assert not is_bank_message("점심 김치찌개 9000")

    def test_blank_text_is_not_bank_message(self):
        assert not is_bank_message("")
        assert not is_bank_message("  \n \n")

    def test_matching_is_case_sensitive(self):
        """Latin keywords must match exactly ("KB카드", not "kb카드")."""
        assert is_bank_message("KB카드 사용 3,000원")
        assert not is_bank_message("kb카드 사용 3,000원")


class TestPreprocessBankMessage:
    """Tests for noise stripping."""

    def test_strips_lump_sum_and_balance(self):
        text = "[신한카드] 승인 12,000원 일시불\n잔액: 1,200,000원"
        assert preprocess_bank_message(text) == "[신한카드] 승인 12,000원"

    def test_strips_remaining_limit(self):
        text = "[현대카드] 결제 45,000원 남은한도 2,000,000원"
        assert preprocess_bank_message(text) == "[현대카드] 결제 45,000원"

    def test_strips_installment_and_cumulative(self):
        text = "삼성카드 승인 300,000원 할부 3개월\n누적 1,500,000원"
        assert preprocess_bank_message(text) == "삼성카드 승인 300,000원"

    def test_collapses_whitespace_and_drops_empty_lines(self):
        text = "  카카오뱅크   출금\n\n\n  5,500원   스타벅스  "
        assert preprocess_bank_message(text) == "카카오뱅크 출금\n5,500원 스타벅스"

    def test_keeps_transaction_amount(self):
        result = preprocess_bank_message("[카카오뱅크] 출금 5,500원 스타벅스 잔액 994,500원")
        assert "5,500원" in result
        assert "994,500" not in result

    @pytest.mark.parametrize("text", [
        "[신한카드] 승인 12,000원 일시불\n잔액: 1,200,000원",
        "잔일시불액 5,000 출금",
        "  국민  승인 \n\n 한도 100,000원 ",
        "",
    ])
    def test_is_idempotent(self, text):
        once = preprocess_bank_message(text)
        assert preprocess_bank_message(once) == once


class TestIsFinancialInput:
    """Tests for the out-of-domain filter."""

    @pytest.mark.parametrize("text", [
        "점심 김치찌개 9000",
        "스타벅스 4500",
        "택시비 3만원",
        "카카오뱅크 잔액 150만원",
        "[카카오뱅크] 출금 5,500원",
        "월급 들어옴",
        "넷플릭스 구독",
    ])
    def test_finance_input_passes(self, text):
        assert is_financial_input(text)

    @pytest.mark.parametrize("text", [
        "오늘 날씨 어때",
        "자바스크립트 코드 짜줘",
        "사랑해",
    ])
    def test_off_topic_input_is_rejected(self, text):
        assert not is_financial_input(text)

    def test_blank_input_passes(self):
        """Emptiness is reported separately by the caller."""
        assert is_financial_input("")
        assert is_financial_input("   ")

    def test_error_message_gives_examples(self):
        assert OOD_ERROR_MESSAGE.startswith("가계부와 관련된 내용을 입력해 주세요.")
        assert "점심 김치찌개 9000" in OOD_ERROR_MESSAGE


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
