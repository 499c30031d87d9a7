"""
JSON Extraction from Model Output

Models wrap their JSON in prose or code fences no matter how firmly the
prompt asks them not to. Extraction is best-effort text surgery:

1. A fenced block (```json ... ``` or bare ``` ... ```) wins
2. Else, for object-shaped replies, the first {...} span
3. Else the first [...] span
4. Else the whole trimmed text (and let JSON decoding fail loudly)

DESIGN DECISION: Extraction sits behind ResponseExtractor so that a
provider with constrained/structured output can skip the regex layer
without touching the validator.
"""

import re
from abc import ABC, abstractmethod

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")
_ARRAY_SPAN = re.compile(r"\[[\s\S]*\]")


def extract_json(text: str, expect_object: bool = False) -> str:
    """
    Pull the JSON payload out of free-text model output.

    Args:
        text: Raw model output
        expect_object: Look for a {...} object before a [...] array

    Returns:
        The candidate JSON text, whitespace-trimmed
    """
    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        return fenced.group(1).strip()

    if expect_object:
        obj = _OBJECT_SPAN.search(text)
        if obj:
            return obj.group(0).strip()

    array = _ARRAY_SPAN.search(text)
    if array:
        return array.group(0).strip()

    return text.strip()


class ResponseExtractor(ABC):
    """Turns raw model output into a JSON string."""

    @abstractmethod
    def extract(self, text: str) -> str:
        pass


class RegexResponseExtractor(ResponseExtractor):
    """Default extractor built on extract_json."""

    def __init__(self, expect_object: bool = False):
        self._expect_object = expect_object

    def extract(self, text: str) -> str:
        return extract_json(text, expect_object=self._expect_object)

