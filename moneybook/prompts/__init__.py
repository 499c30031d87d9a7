"""Prompt construction package."""

from moneybook.prompts.builder import (
    DEFAULT_IMAGE_INSTRUCTION,
    DEFAULT_UNIFIED_IMAGE_INSTRUCTION,
    OTHER_EXPENSE_CATEGORY,
    OTHER_INCOME_CATEGORY,
    ContentPart,
    build_image_user_content,
    build_system_prompt,
    build_unified_system_prompt,
    build_user_prompt,
)

__all__ = [
    "DEFAULT_IMAGE_INSTRUCTION",
    "DEFAULT_UNIFIED_IMAGE_INSTRUCTION",
    "OTHER_EXPENSE_CATEGORY",
    "OTHER_INCOME_CATEGORY",
    "ContentPart",
    "build_image_user_content",
    "build_system_prompt",
    "build_unified_system_prompt",
    "build_user_prompt",
]
