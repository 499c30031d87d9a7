"""Model output extraction and validation package."""

from moneybook.validation.extractor import (
    RegexResponseExtractor,
    ResponseExtractor,
    extract_json,
)
from moneybook.validation.validator import (
    InputRejectedError,
    ResponseError,
    ResponseFormatError,
    ResponseValidationError,
    load_json,
    parse_unified_response,
    validate_accounts,
    validate_transactions,
)

__all__ = [
    "InputRejectedError",
    "RegexResponseExtractor",
    "ResponseError",
    "ResponseExtractor",
    "ResponseFormatError",
    "ResponseValidationError",
    "extract_json",
    "load_json",
    "parse_unified_response",
    "validate_accounts",
    "validate_transactions",
]
