"""Urgency keyword detection.

Urgency is keyword-only: a high priority never makes a task urgent on its
own, so the two signals can be set and tested independently.
"""

import re

from tasktracker.services.intent import Span


class UrgencyDetector:
    URGENT_PATTERN = re.compile(
        r"\b(?:срочн\w*|спешн\w*|немедленн\w*|экстренн\w*|быстро"
        r"|urgent(?:ly)?|asap|immediately)\b",
        re.IGNORECASE,
    )

    def find(self, text: str) -> list[Span]:
        """Return the spans of every urgency keyword in the text."""
        return [match.span() for match in self.URGENT_PATTERN.finditer(text)]

    def is_urgent(self, text: str, priority: int | None = None) -> bool:
        # priority never implies urgency
        return self.URGENT_PATTERN.search(text) is not None
