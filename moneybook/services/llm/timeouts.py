"""
Per-call Deadlines

Long inputs and images take the model longer to answer, so when
LLM_ADAPTIVE_TIMEOUT is on the deadline grows with the length of the
typed text. Every per-call deadline is clamped to
[MIN_TIMEOUT_SECONDS, MAX_TIMEOUT_SECONDS].

A timed-out parse is reported with the deadline that was applied, so the
user knows how long it waited.
"""

from typing import Optional

MIN_TIMEOUT_SECONDS = 15.0
MAX_TIMEOUT_SECONDS = 120.0

# (max trimmed length, seconds); longer inputs get the last value
TEXT_TIMEOUT_TIERS = ((100, 25.0), (400, 45.0), (None, 75.0))
IMAGE_TIMEOUT_TIERS = ((100, 70.0), (400, 85.0), (None, 100.0))

TEXT_TIMEOUT_MESSAGE = (
    "입력 분석이 지연되고 있어요. (최대 {seconds}초)\n"
    "긴 입력은 시간이 더 걸릴 수 있어요. 잠시 후 다시 시도해 주세요."
)
IMAGE_TIMEOUT_MESSAGE = (
    "이미지 분석이 지연되고 있어요. (최대 {seconds}초)\n"
    "이미지가 크거나 텍스트가 많으면 시간이 더 걸릴 수 있어요. 다시 시도해 주세요."
)


def clamp_timeout(seconds: float) -> float:
    return max(MIN_TIMEOUT_SECONDS, min(seconds, MAX_TIMEOUT_SECONDS))


def _by_length(text: str, tiers) -> float:
    length = len(text.strip())
    for limit, seconds in tiers:
        if limit is None or length <= limit:
            return seconds


def text_timeout_seconds(text: str) -> float:
    """Deadline for a text parse: 25s, 45s or 75s."""
    return _by_length(text, TEXT_TIMEOUT_TIERS)


def image_timeout_seconds(text: str) -> float:
    """
    Deadline for an image parse, sized by the instruction typed with it.

    Images always cost more than text, hence the higher floor (70s).
    """
    return _by_length(text, IMAGE_TIMEOUT_TIERS)


def timeout_error_message(seconds: Optional[float], is_image: bool) -> Optional[str]:
    """Displayable message for a timed-out parse, or None if no deadline is known."""
    if not seconds:
        return None
    template = IMAGE_TIMEOUT_MESSAGE if is_image else TEXT_TIMEOUT_MESSAGE
    return template.format(seconds=round(seconds))
