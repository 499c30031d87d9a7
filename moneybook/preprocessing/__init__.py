"""Input classification and bank-message preprocessing."""

from moneybook.preprocessing.bank_message import (
    is_bank_message,
    preprocess_bank_message,
)
from moneybook.preprocessing.domain_filter import (
    OOD_ERROR_MESSAGE,
    is_financial_input,
)

__all__ = [
    "OOD_ERROR_MESSAGE",
    "is_bank_message",
    "is_financial_input",
    "preprocess_bank_message",
]
