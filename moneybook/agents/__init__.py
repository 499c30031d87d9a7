"""AI Agents package."""

from moneybook.agents.parser_agent import (
    EMPTY_IMAGE_MESSAGE,
    EMPTY_INPUT_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    IMAGE_FAILURE_PREFIX,
    TEXT_FAILURE_PREFIX,
    ParserAgent,
    user_facing_message,
)
from moneybook.agents.retry import MAX_PARSE_ATTEMPTS, run_with_retry

__all__ = [
    "EMPTY_IMAGE_MESSAGE",
    "EMPTY_INPUT_MESSAGE",
    "GENERIC_ERROR_MESSAGE",
    "IMAGE_FAILURE_PREFIX",
    "MAX_PARSE_ATTEMPTS",
    "TEXT_FAILURE_PREFIX",
    "ParserAgent",
    "run_with_retry",
    "user_facing_message",
]
