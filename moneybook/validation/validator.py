"""
Model Output Validation

DESIGN DECISION: Validation is strict and fails fast.
One malformed item fails the whole batch - we never hand the user a
partial result that silently dropped lines. The error names the 1-based
item index and the field, in a sentence the UI can show as-is, e.g.
"거래 항목 2의 금액이 유효하지 않습니다: 0".

What IS coerced (the model is sloppy in harmless ways):
- Strings are stringified and trimmed
- Amounts/balances are rounded half-up to whole currency units
- Unpadded dates (2025-6-1) are rewritten as YYYY-MM-DD
- Account balances become magnitudes
- Optional fields with the wrong shape are dropped, not rejected

What is NOT coerced:
- Missing required fields
- Types outside the closed sets
- Non-numeric or non-positive amounts
- Dates that are not real calendar dates
"""

import json
import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import ValidationError

from moneybook.errors import MoneybookError
from moneybook.models.parsing import (
    DEFAULT_ACCOUNT_ICON,
    AccountSubType,
    AccountType,
    ParsedAccount,
    ParsedTransaction,
    ParseIntent,
    TransactionType,
    UnifiedParseResult,
)

REQUIRED_TRANSACTION_FIELDS = ("date", "type", "category", "description", "amount")
REQUIRED_ACCOUNT_FIELDS = ("name", "type", "subType", "balance")

_TRANSACTION_TYPES = {t.value for t in TransactionType}
_ACCOUNT_TYPES = {t.value for t in AccountType}
_SUB_TYPES = {t.value for t in AccountSubType}

DEFAULT_REJECTION_REASON = "가계부와 관련된 내용을 입력해 주세요."


class ResponseError(MoneybookError):
    """Base exception for unusable model output."""
    pass


class ResponseFormatError(ResponseError):
    """Output is not JSON, or not of a recognizable shape."""
    pass


class ResponseValidationError(ResponseError):
    """One item of the output violates the schema."""

    def __init__(self, message: str, item_index: int, field: str):
        self.item_index = item_index
        self.field = field
        super().__init__(message)


class InputRejectedError(ResponseError):
    """The model judged the input unrelated to household finance."""
    pass


def load_json(text: str) -> Any:
    """Decode extracted JSON text."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseFormatError(f"LLM 응답을 JSON으로 해석할 수 없습니다: {e.msg}") from e


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_number(value: Any) -> bool:
    # bool is an int subclass; true/false are not amounts
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _round_half_up(value: float) -> int:
    """Whole units, halves away from zero (2.5 -> 3, not round()'s 2)."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _require_fields(item: dict, fields: tuple[str, ...], label: str, index: int) -> None:
    for field in fields:
        if _is_missing(item.get(field)):
            raise ResponseValidationError(
                f"{label} 항목 {index}에 필수 필드가 누락되었습니다: {field}",
                item_index=index,
                field=field,
            )


def _validate_transaction(item: Any, index: int) -> ParsedTransaction:
    if not isinstance(item, dict):
        raise ResponseValidationError(
            f"거래 항목 {index}의 형식이 올바르지 않습니다.",
            item_index=index,
            field="item",
        )

    _require_fields(item, REQUIRED_TRANSACTION_FIELDS, "거래", index)

    if not isinstance(item["type"], str) or item["type"] not in _TRANSACTION_TYPES:
        raise ResponseValidationError(
            f"거래 항목 {index}의 type이 유효하지 않습니다: {item['type']}",
            item_index=index,
            field="type",
        )

    amount = item["amount"]
    if not _is_number(amount) or _round_half_up(amount) <= 0:
        raise ResponseValidationError(
            f"거래 항목 {index}의 금액이 유효하지 않습니다: {amount}",
            item_index=index,
            field="amount",
        )

    date = str(item["date"]).strip()
    try:
        date = datetime.strptime(date, "%Y-%m-%d").date().isoformat()
    except ValueError:
        raise ResponseValidationError(
            f"거래 항목 {index}의 날짜가 유효하지 않습니다: {date}",
            item_index=index,
            field="date",
        )

    fields: dict[str, Any] = {
        "date": date,
        "type": item["type"],
        "category": str(item["category"]).strip(),
        "description": str(item["description"]).strip(),
        "amount": _round_half_up(amount),
    }

    if item.get("isRecurring") is True:
        fields["is_recurring"] = True
        day = item.get("dayOfMonth")
        if _is_number(day) and float(day).is_integer() and 1 <= day <= 31:
            fields["day_of_month"] = int(day)

    suggested = item.get("suggestedCategory")
    if isinstance(suggested, str) and suggested.strip():
        fields["suggested_category"] = suggested.strip()

    try:
        return ParsedTransaction(**fields)
    except ValidationError as e:
        raise ResponseValidationError(
            f"거래 항목 {index}이(가) 유효하지 않습니다.",
            item_index=index,
            field=str(e.errors()[0]["loc"][0]) if e.errors() else "item",
        ) from e


def validate_transactions(data: Any) -> list[ParsedTransaction]:
    """
    Validate and coerce a list of raw transaction dicts.

    Raises:
        ResponseFormatError: data is not a list
        ResponseValidationError: first offending item
    """
    if not isinstance(data, list):
        raise ResponseFormatError("LLM 응답 형식을 인식할 수 없습니다.")

    return [_validate_transaction(item, i) for i, item in enumerate(data, start=1)]


def _validate_account(item: Any, index: int) -> ParsedAccount:
    if not isinstance(item, dict):
        raise ResponseValidationError(
            f"계정 항목 {index}의 형식이 올바르지 않습니다.",
            item_index=index,
            field="item",
        )

    _require_fields(item, REQUIRED_ACCOUNT_FIELDS, "계정", index)

    if not isinstance(item["type"], str) or item["type"] not in _ACCOUNT_TYPES:
        raise ResponseValidationError(
            f"계정 항목 {index}의 type이 유효하지 않습니다: {item['type']}",
            item_index=index,
            field="type",
        )

    if not isinstance(item["subType"], str) or item["subType"] not in _SUB_TYPES:
        raise ResponseValidationError(
            f"계정 항목 {index}의 subType이 유효하지 않습니다: {item['subType']}",
            item_index=index,
            field="subType",
        )

    balance = item["balance"]
    if not _is_number(balance):
        raise ResponseValidationError(
            f"계정 항목 {index}의 잔액이 유효하지 않습니다: {balance}",
            item_index=index,
            field="balance",
        )

    icon = item.get("icon")
    try:
        return ParsedAccount(
            name=str(item["name"]).strip(),
            type=item["type"],
            sub_type=item["subType"],
            icon=icon.strip() if isinstance(icon, str) and icon.strip() else DEFAULT_ACCOUNT_ICON,
            balance=_round_half_up(abs(balance)),
        )
    except ValidationError as e:
        raise ResponseValidationError(
            f"계정 항목 {index}이(가) 유효하지 않습니다.",
            item_index=index,
            field=str(e.errors()[0]["loc"][0]) if e.errors() else "item",
        ) from e


def validate_accounts(data: Any) -> list[ParsedAccount]:
    """
    Validate and coerce a list of raw account dicts.

    Raises:
        ResponseFormatError: data is not a list
        ResponseValidationError: first offending item
    """
    if not isinstance(data, list):
        raise ResponseFormatError("LLM 응답 형식을 인식할 수 없습니다.")

    return [_validate_account(item, i) for i, item in enumerate(data, start=1)]


def parse_unified_response(data: Any) -> UnifiedParseResult:
    """
    Interpret a unified reply.

    Accepts the object form {intent, transactions, accounts} and, for
    older prompts, a bare array (taken as transactions).

    Raises:
        InputRejectedError: The model replied {"rejected": true, ...}
        ResponseFormatError: Unknown shape, or nothing was parsed
        ResponseValidationError: An item is malformed
    """
    if isinstance(data, list):
        return UnifiedParseResult(
            intent=ParseIntent.TRANSACTION,
            transactions=validate_transactions(data),
        )

    if not isinstance(data, dict):
        raise ResponseFormatError("LLM 응답 형식을 인식할 수 없습니다.")

    if data.get("rejected") is True:
        reason = data.get("reason")
        raise InputRejectedError(
            reason if isinstance(reason, str) and reason.strip() else DEFAULT_REJECTION_REASON
        )

    intent = ParseIntent.ACCOUNT if data.get("intent") == "account" else ParseIntent.TRANSACTION

    raw_transactions = data.get("transactions")
    raw_accounts = data.get("accounts")
    transactions = validate_transactions(raw_transactions) if raw_transactions is not None else []
    accounts = validate_accounts(raw_accounts) if raw_accounts is not None else []

    if not transactions and not accounts:
        raise ResponseFormatError("파싱 결과가 비어 있습니다.")

    return UnifiedParseResult(
        intent=intent,
        transactions=transactions,
        accounts=accounts,
    )
