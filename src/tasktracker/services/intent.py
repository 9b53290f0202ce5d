from dataclasses import dataclass
from datetime import datetime

# (start, end) character offsets into the raw text, end exclusive
Span = tuple[int, int]

DEFAULT_PRIORITY = 5
MIN_PRIORITY = 0
MAX_PRIORITY = 10


@dataclass(frozen=True)
class ParsedTaskIntent:
    title: str
    priority: int = DEFAULT_PRIORITY
    urgent: bool = False
    due_at: datetime | None = None
    description: str = ""
    raw_text: str = ""

    @property
    def has_due_date(self) -> bool:
        return self.due_at is not None
