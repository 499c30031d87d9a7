"""
Bank/Card Notification Preprocessing

Pasted notification texts carry a lot of noise next to the one thing we
care about (the transaction): running balances, remaining limits,
cumulative totals and installment annotations. The noise confuses the
model, especially balances, which look exactly like amounts.

This module:
1. Detects whether input looks like a bank/card notification
2. Strips the noise and normalizes whitespace

Normalization is idempotent: noise is stripped to a fixed point and
whitespace collapsing is stable.
"""

import re

# Bank and card brand names plus transaction action words.
# Matching is a case-sensitive substring test on each line.
BANK_KEYWORDS: tuple[str, ...] = (
    # Banks
    "카카오뱅크", "국민", "신한", "우리", "하나", "농협", "기업", "SC제일", "토스뱅크",
    # Cards
    "신한카드", "삼성카드", "현대카드", "KB카드", "국민카드", "하나카드", "우리카드",
    "롯데카드", "NH카드", "비씨카드", "토스",
    # Actions
    "승인", "출금", "입금", "결제",
)

# Applied in order, each match replaced with "".
NOISE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"잔액\s*[:\s]?\s*[\d,]+원?"),
    re.compile(r"누적\s*[:\s]?\s*[\d,]+원?"),
    re.compile(r"남은\s*한도\s*[:\s]?\s*[\d,]+원?"),
    re.compile(r"한도\s*[:\s]?\s*[\d,]+원?"),
    re.compile(r"총\s*잔액\s*[:\s]?\s*[\d,]+원?"),
    re.compile(r"일시불"),
    re.compile(r"할부\s*\d+개?월?"),
)

_WHITESPACE_RUN = re.compile(r"\s+")


def is_bank_message(text: str) -> bool:
    """
    Check whether text looks like a bank/card notification.

    True if any non-blank line contains one of BANK_KEYWORDS.
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return False

    return any(
        keyword in line
        for line in lines
        for keyword in BANK_KEYWORDS
    )


def preprocess_bank_message(text: str) -> str:
    """
    Remove balance/limit/installment noise from a notification.

    Example:
        "[신한카드] 승인 12,000원 일시불\\n잔액: 1,200,000원"
        -> "[신한카드] 승인 12,000원"
    """
    # Removing one fragment can glue a new one together ("잔일시불액 5,000"),
    # so strip until nothing changes.
    previous = None
    while text != previous:
        previous = text
        for pattern in NOISE_PATTERNS:
            text = pattern.sub("", text)

    lines = (
        _WHITESPACE_RUN.sub(" ", line).strip()
        for line in text.split("\n")
    )
    return "\n".join(line for line in lines if line)
