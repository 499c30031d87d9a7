"""
Out-of-Domain Input Filter

DESIGN DECISION: This check runs BEFORE any prompt is built.
Off-topic input ("오늘 날씨 어때") must not cost an LLM call. The filter is
deliberately permissive: anything with an amount, a bank notification shape
or a finance word passes. The model gets a second chance to reject
borderline input itself (see the unified prompt's "rejected" reply).
"""

import re

# Any one of these (case-insensitive substring) marks the input as in-domain.
FINANCIAL_KEYWORDS: tuple[str, ...] = (
    # Amount units used on their own
    "만원", "천원", "백만원",
    # Transaction actions
    "결제", "승인", "출금", "입금", "이체", "송금", "환불", "취소",
    "구매", "구입", "샀", "샀다", "지불", "납부", "충전",
    # Income/expense vocabulary
    "월급", "급여", "용돈", "보너스", "상여", "수입", "지출",
    "매출", "수익", "이자", "배당", "환급", "정산",
    # Category words
    "식비", "교통", "카페", "간식", "쇼핑", "통신", "관리비",
    "보험", "의료", "교육", "문화", "여행", "구독", "배달",
    # Assets and debts
    "잔액", "잔고", "대출", "적금", "예금", "투자", "주식",
    "펀드", "부채", "미결제", "카드값", "할부",
    # Banks and cards
    "은행", "카드", "카카오뱅크", "토스", "신한", "국민", "우리",
    "하나", "농협", "기업", "SC", "씨티",
    # Recurring schedules
    "고정", "매달", "매월", "구독료", "월세",
    # Account book features
    "가계부", "내역", "영수증",
)

# Digits followed by a currency unit, e.g. "9000원", "3 만원", "5천"
AMOUNT_PATTERN = re.compile(r"\d+[\s,]*(원|만\s*원|천\s*원|백만|만|천)")

# Bare number of 4+ digits, e.g. "스타벅스 4500"
NUMERIC_AMOUNT_PATTERN = re.compile(r"\d{4,}")

# "[카카오뱅크] 출금 ..." style notifications
BANK_MESSAGE_PATTERN = re.compile(r"\[.+\]\s*(출금|입금|결제|승인|이체)")

OOD_ERROR_MESSAGE = (
    "가계부와 관련된 내용을 입력해 주세요.\n"
    "예: 점심 김치찌개 9000, 카카오뱅크 잔액 150만원"
)


def is_financial_input(text: str) -> bool:
    """
    Check whether text plausibly concerns personal finance.

    Returns True to let the input through, False to reject it with
    OOD_ERROR_MESSAGE. Blank input passes; emptiness is reported by the
    caller with its own message.
    """
    normalized = text.strip().lower()

    if not normalized:
        return True

    if BANK_MESSAGE_PATTERN.search(normalized):
        return True

    if AMOUNT_PATTERN.search(normalized):
        return True

    if NUMERIC_AMOUNT_PATTERN.search(normalized):
        return True

    return any(keyword.lower() in normalized for keyword in FINANCIAL_KEYWORDS)
