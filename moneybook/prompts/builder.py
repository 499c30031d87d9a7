"""
Prompt Construction

Builds the system prompt (rules + the user's categories + today's date)
and the user turn (text, or image + text).

DESIGN DECISION: Prompts are plain deterministic string construction.
No I/O, no clock access: `today` is always passed in, so the same inputs
always produce the same prompt and tests can pin it. Prompts must be
rebuilt per call because both the category list and the date vary.

Two system prompts exist:
- build_system_prompt: transactions only, the model answers with a JSON array
- build_unified_system_prompt: transactions and/or accounts, the model
  answers with a JSON object carrying an intent
"""

from typing import Any, Iterable, Sequence

from moneybook.models.account import Account
from moneybook.models.parsing import AccountType, LLMCategory, TransactionType

OTHER_EXPENSE_CATEGORY = "기타 지출"
OTHER_INCOME_CATEGORY = "기타 수입"

DEFAULT_IMAGE_INSTRUCTION = "이 이미지에서 거래 내역을 추출해주세요."
DEFAULT_UNIFIED_IMAGE_INSTRUCTION = (
    "이 이미지에서 거래 내역 또는 자산/부채 정보를 추출해주세요."
)

# One content part of a user turn, OpenAI chat-completions shape.
ContentPart = dict[str, Any]


def _category_names(categories: Iterable[LLMCategory], kind: TransactionType) -> str:
    return ", ".join(c.name for c in categories if c.type == kind)


def _transaction_rules(categories: Sequence[LLMCategory], today: str) -> str:
    expense = _category_names(categories, TransactionType.EXPENSE)
    income = _category_names(categories, TransactionType.INCOME)

    return f"""### 카테고리
지출: {expense}
수입: {income}

### 날짜
- 날짜가 없으면 오늘({today})
- "오늘"/"어제"/"그제"는 오늘({today}) 기준으로 계산
- "지난주 금요일", "이번주 월요일" 같은 요일 표현도 오늘 기준으로 계산
- "1/15"처럼 연도 없는 날짜는 올해로 처리
- 출력은 항상 YYYY-MM-DD

### 수입/지출 구분
- 급여/월급/용돈/보너스/수익/이자/배당/환급/환불/입금 → income
- 그 외 → expense

### 카테고리 선택
- 위 목록에서만 선택
- 맞는 카테고리가 없으면 "{OTHER_EXPENSE_CATEGORY}"/"{OTHER_INCOME_CATEGORY}"로 두고 suggestedCategory에 새 카테고리명 제안

### 금액
- 숫자: "9000"→9000, "12,000원"→12000
- 단위: "9천"→9000, "3만"→30000, "300만원"→3000000
- 복합: "1만5천"→15000, "2만 3천원"→23000
- 금액을 알 수 없는 항목은 출력하지 않음 (0이나 null로 채우지 말 것)

### 여러 건
- 쉼표, 줄바꿈, "그리고"/"하고"/"랑" 같은 연결어로 나뉜 항목은 각각 별도 거래로 분리

### 은행/카드 알림
- 잔액/한도/누적/할부 정보는 무시하고 거래 금액+상호명+날짜만 추출

### 고정 거래
- "매달"/"매월"/"고정"/"구독" 키워드 → isRecurring: true
- 날짜가 언급되면 dayOfMonth(1~31) 설정 ("매달 25일 월급" → 25)"""


def build_system_prompt(categories: Sequence[LLMCategory], today: str) -> str:
    """
    Build the transaction-only system prompt.

    Args:
        categories: The user's full category list, used verbatim
        today: ISO date (YYYY-MM-DD) relative dates resolve against

    The model is told to answer with ONLY a JSON array of transactions.
    """
    return f"""당신은 가계부 AI 비서입니다. 사용자 입력에서 수입/지출 거래 내역을 추출합니다.

## 오늘: {today}

{_transaction_rules(categories, today)}

## 출력 형식

반드시 아래 형식의 JSON 배열만 출력하세요. 설명 문장은 쓰지 마세요.

```json
[
  {{"date":"YYYY-MM-DD","type":"expense"|"income","category":"카테고리명","description":"설명","amount":숫자,"isRecurring":false,"dayOfMonth":null,"suggestedCategory":null}}
]
```

- date, type, category, description, amount는 필수
- amount는 0보다 큰 정수
- isRecurring, dayOfMonth, suggestedCategory는 해당할 때만"""


def _account_list(existing_accounts: Sequence[Account]) -> str:
    if not existing_accounts:
        return "없음"
    return ", ".join(
        f"{a.name}({'자산' if a.type == AccountType.ASSET else '부채'})"
        for a in existing_accounts
    )


def build_unified_system_prompt(
    categories: Sequence[LLMCategory],
    today: str,
    existing_accounts: Sequence[Account] = (),
) -> str:
    """
    Build the unified system prompt.

    The model first decides the intent (transaction vs. account), then
    fills the matching list. Mixed input fills both. Existing account
    names are listed so the model reuses them ("카뱅" -> "카카오뱅크"),
    which makes reconciliation by exact name work.
    """
    return f"""당신은 가계부 AI 비서입니다. 사용자 입력을 분석하여 **거래 내역** 또는 **자산/부채 정보**로 자동 분류합니다.

## 오늘: {today}

## 1단계: 의도 판별 (intent)

입력을 읽고 아래 기준으로 "transaction" 또는 "account"를 판별하세요.

**"account" (자산/부채)**:
- 계좌 잔액/잔고 언급: "카카오뱅크 잔액 150만", "현금 15만원"
- 부채 잔액 언급: "학자금대출 1200만", "신한카드 미결제 45만"
- 자산 등록/업데이트 의도: "적금 540만", "주식계좌 820만"
- 은행/카드 이름 + 금액만 있고 거래 행위(결제, 출금, 승인)가 없는 경우

**"transaction" (거래)**:
- 지출 행위: "점심 김치찌개 9000", "스타벅스 4500"
- 수입 행위: "월급 350만원"
- 은행 알림: "[카카오뱅크] 출금 5,500원 스타벅스"
- 결제/승인/출금/입금 키워드 포함

## 2단계-A: 거래 파싱 (intent="transaction")

{_transaction_rules(categories, today)}

## 2단계-B: 자산/부채 파싱 (intent="account")

### 기존 등록된 계정: {_account_list(existing_accounts)}

### 규칙
- 자산(asset): 은행잔액, 현금, 적금, 투자, 주식, 토스/카카오페이 잔액
- 부채(debt): 카드 미결제, 대출, 학자금대출, 전세대출. 음수 금액도 부채
- subType: bank/cash/savings/investment/credit_card/loan/other
- 아이콘: bank→🏦, cash→💵, savings→🏧, investment→📈, credit_card→💳, loan→🏠, other→📦
- 이름 정제: "카카오뱅크 잔액"→"카카오뱅크", "신한카드 미결제"→"신한카드"
- 기존 계정과 이름 유사하면 동일 이름 사용 (예: "카뱅"→"카카오뱅크")
- balance는 항상 양수 (부채 여부는 type으로 표현)

## 출력 형식

반드시 아래 JSON만 출력하세요.

```json
{{
  "intent": "transaction" | "account",
  "transactions": [
    {{"date":"YYYY-MM-DD","type":"expense"|"income","category":"카테고리명","description":"설명","amount":숫자,"isRecurring":false,"dayOfMonth":null,"suggestedCategory":null}}
  ],
  "accounts": [
    {{"name":"계정명","type":"asset"|"debt","subType":"bank","icon":"🏦","balance":숫자}}
  ]
}}
```

- intent="transaction"이면 transactions 배열 채우고 accounts는 빈 배열
- intent="account"이면 accounts 배열 채우고 transactions는 빈 배열
- 둘 다 섞인 입력이면 각각 분리하여 채우기 (intent는 주된 의도)

## 도메인 외 입력 거부 (OOD)

입력이 거래/자산/부채와 **전혀 관련 없는** 경우 아래 JSON을 반환하세요:

```json
{{"rejected": true, "reason": "가계부와 관련 없는 입력입니다."}}
```

**거부 예시**: "오늘 날씨 어때?", "자바스크립트 코드 짜줘", "사랑해", "재미있는 얘기 해줘"
**거부하지 마세요**: 금액이 포함된 모든 입력, 은행/카드 메시지, 자산/부채 언급"""


def build_user_prompt(text: str) -> str:
    """Text user turn."""
    return text.strip()


def build_image_user_content(
    image_base64: str,
    mime_type: str,
    text: str,
    fallback_instruction: str = DEFAULT_IMAGE_INSTRUCTION,
) -> list[ContentPart]:
    """
    Image user turn: an inlined data-URL image followed by one text part.

    Blank accompanying text is replaced by fallback_instruction so the
    model always gets an explicit ask.
    """
    return [
        {
            "type": "image_url",
            "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
        },
        {
            "type": "text",
            "text": text.strip() or fallback_instruction,
        },
    ]
