import re
from collections.abc import Iterable

from tasktracker.services.intent import Span


class TitleSanitizer:
    """Builds a task title by cutting consumed marker spans out of the raw text.

    Spans come from the extractors that actually matched, so text that merely
    looks like a marker elsewhere in the message is left alone.
    """

    EDGE_CHARS = " \t\r\n,.;:!?-–—"

    WHITESPACE_PATTERN = re.compile(r"\s+")
    SPACE_BEFORE_PUNCT_PATTERN = re.compile(r"\s+([,.;:!?])")
    COMMA_RUN_PATTERN = re.compile(r",(?:\s*,)+")

    def sanitize(self, text: str, consumed_spans: Iterable[Span] = ()) -> str:
        cleaned = self._cut_spans(text, consumed_spans)
        cleaned = self.WHITESPACE_PATTERN.sub(" ", cleaned)
        cleaned = self.SPACE_BEFORE_PUNCT_PATTERN.sub(r"\1", cleaned)
        cleaned = self.COMMA_RUN_PATTERN.sub(",", cleaned)
        return cleaned.strip(self.EDGE_CHARS)

    @staticmethod
    def merge_spans(spans: Iterable[Span]) -> list[Span]:
        merged: list[Span] = []
        for start, end in sorted(spans):
            if merged and start <= merged[-1][1]:
                merged[-1] = (merged[-1][0], max(merged[-1][1], end))
            else:
                merged.append((start, end))
        return merged

    def _cut_spans(self, text: str, spans: Iterable[Span]) -> str:
        parts = []
        position = 0
        for start, end in self.merge_spans(spans):
            parts.append(text[position:start])
            # Keep a separator so neighbouring words do not fuse
            parts.append(" ")
            position = end
        parts.append(text[position:])
        return "".join(parts)
