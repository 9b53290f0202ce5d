import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from tasktracker.config import settings
from tasktracker.services.dates import RelativeDateResolver
from tasktracker.services.errors import (
    EmptyInputError,
    EmptyTitleError,
    InvalidPriorityRangeError,
)
from tasktracker.services.intent import (
    DEFAULT_PRIORITY,
    MAX_PRIORITY,
    MIN_PRIORITY,
    ParsedTaskIntent,
    Span,
)
from tasktracker.services.priority import PriorityExtractor
from tasktracker.services.sanitizer import TitleSanitizer
from tasktracker.services.urgency import UrgencyDetector

logger = logging.getLogger(__name__)


class TextIntentParser:
    """Turns one line of free text into a ParsedTaskIntent.

    Example:
        "Купить молоко завтра в 15:00, приоритет 8" at 2026-01-01 10:00
        -> title "Купить молоко", due 2026-01-02 15:00, priority 8, not urgent
    """

    def __init__(
        self,
        timezone: str | None = None,
        default_hour: int | None = None,
    ):
        self.timezone = ZoneInfo(timezone or settings.user_timezone)
        self.priority_extractor = PriorityExtractor()
        self.urgency_detector = UrgencyDetector()
        self.date_resolver = RelativeDateResolver(default_hour=default_hour)
        self.sanitizer = TitleSanitizer()

    def now(self) -> datetime:
        """Current time in the user's timezone, for callers that need a reference."""
        return datetime.now(self.timezone)

    def parse(self, text: str, now: datetime) -> ParsedTaskIntent:
        """Parse ``text`` relative to ``now``.

        Raises:
            EmptyInputError: If text is empty or whitespace
            UnresolvableDateError: If a date expression is malformed
            EmptyTitleError: If nothing is left once markers are removed
        """
        if not text or not text.strip():
            raise EmptyInputError()

        consumed: list[Span] = []

        priority_match = self.priority_extractor.find(text)
        if priority_match:
            priority = priority_match.value
            consumed.append(priority_match.span)
        else:
            priority = DEFAULT_PRIORITY

        urgent = self.urgency_detector.is_urgent(text, priority)
        consumed.extend(self.urgency_detector.find(text))

        date_match = self.date_resolver.find(text, now)
        if date_match:
            consumed.extend(date_match.spans)

        title = self.sanitizer.sanitize(text, consumed)

        intent = ParsedTaskIntent(
            title=title,
            priority=priority,
            urgent=urgent,
            due_at=date_match.due_at if date_match else None,
            description="",
            raw_text=text,
        )
        validate(intent)

        logger.info(
            f"Parsed intent: title={intent.title!r} priority={intent.priority} "
            f"urgent={intent.urgent} due={intent.due_at}"
        )
        return intent


def validate(intent: ParsedTaskIntent) -> None:
    """Raise the matching IntentValidationError if the intent is not usable."""
    if not intent.title:
        raise EmptyTitleError(intent.raw_text)
    if not MIN_PRIORITY <= intent.priority <= MAX_PRIORITY:
        raise InvalidPriorityRangeError(intent.priority)


def is_valid(intent: ParsedTaskIntent | None) -> bool:
    if intent is None:
        return False
    return bool(intent.title) and MIN_PRIORITY <= intent.priority <= MAX_PRIORITY
