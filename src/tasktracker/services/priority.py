"""Explicit priority markers ("приоритет 8", "priority 3")."""

import re
from dataclasses import dataclass

from tasktracker.services.intent import MAX_PRIORITY, MIN_PRIORITY, Span


@dataclass(frozen=True)
class PriorityMatch:
    value: int  # already clamped to 0-10
    raw_value: int
    span: Span


def clamp_priority(value: int) -> int:
    return max(MIN_PRIORITY, min(MAX_PRIORITY, value))


class PriorityExtractor:
    """Finds the first priority marker followed by an integer.

    The localized lexicon is tried before the English fallback, so
    "priority 2, приоритет 9" yields 9.
    """

    PATTERNS = [
        re.compile(r"\b(?:приоритет|важность)\s*[:=]?\s*(-?\d+)", re.IGNORECASE),
        re.compile(r"\b(?:priority|importance)\s*[:=]?\s*(-?\d+)", re.IGNORECASE),
    ]

    def find(self, text: str) -> PriorityMatch | None:
        for pattern in self.PATTERNS:
            match = pattern.search(text)
            if match:
                raw_value = int(match.group(1))
                return PriorityMatch(
                    value=clamp_priority(raw_value),
                    raw_value=raw_value,
                    span=match.span(),
                )
        return None

    def extract(self, text: str) -> int | None:
        match = self.find(text)
        return match.value if match else None
