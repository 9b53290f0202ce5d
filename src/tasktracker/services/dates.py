"""Relative and absolute date expressions in Russian and English.

Resolves "завтра в 15:00", "через 3 дня", "in 2 hours", "в пятницу",
"today at 9:30" and bare "HH:MM" clock times into an absolute datetime.
All resolution is anchored to an explicit ``now``; the resolver never reads
the wall clock.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from tasktracker.config import settings
from tasktracker.services.errors import UnresolvableDateError
from tasktracker.services.intent import Span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockTime:
    hour: int
    minute: int
    span: Span


@dataclass(frozen=True)
class DateMatch:
    """A resolved due date plus the text spans that produced it."""

    due_at: datetime
    spans: tuple[Span, ...]
    has_time: bool


class RelativeDateResolver:
    """Maps date-time expressions in free text to an absolute timestamp.

    Precedence when several expressions are present: day after tomorrow,
    tomorrow, "in N <unit>", today, weekday name. A clock time is overlaid
    on whichever base date won; on its own it means today at that time.
    """

    DAY_AFTER_TOMORROW_PATTERN = re.compile(
        r"\b(?:послезавтра|day after tomorrow)\b", re.IGNORECASE
    )
    TOMORROW_PATTERN = re.compile(r"\b(?:завтра|tomorrow)\b", re.IGNORECASE)
    TODAY_PATTERN = re.compile(r"\b(?:сегодня|today)\b", re.IGNORECASE)
    RELATIVE_PATTERN = re.compile(
        r"\b(?:через|in)\s+(\d+)\s+"
        r"(дней|дня|день|часов|часа|час|минуту|минуты|минут|недель|недели|неделю"
        r"|days?|hours?|minutes?|weeks?)\b",
        re.IGNORECASE,
    )
    # "среда" is also an ordinary noun, so it needs a preposition
    WEEKDAY_PATTERN = re.compile(
        r"(?:\b(?:во|в|on)\s+)?\b("
        r"понедельник[а-я]*|вторник[а-я]*|четверг[а-я]*|пятниц[аеуы]"
        r"|суббот[аеуы]|воскресень[еяю]"
        r"|monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b"
        r"|\b(?:во|в)\s+(сред[аеуы])\b",
        re.IGNORECASE,
    )
    CLOCK_PATTERN = re.compile(r"(?:\b(?:в|at)\s+)?\b(\d{1,2}):(\d{2})\b", re.IGNORECASE)

    # Prefix of a weekday word -> datetime.weekday() value
    WEEKDAY_PREFIXES = {
        "понед": 0, "втор": 1, "сред": 2, "четв": 3, "пятн": 4, "субб": 5, "воскр": 6,
        "mon": 0, "tue": 1, "wed": 2, "thu": 3, "fri": 4, "sat": 5, "sun": 6,
    }

    # Prefix of a unit word -> timedelta keyword
    UNIT_PREFIXES = {
        "дн": "days", "ден": "days", "day": "days",
        "час": "hours", "hour": "hours",
        "мин": "minutes", "minute": "minutes",
        "нед": "weeks", "week": "weeks",
    }

    DAY_GRANULAR_UNITS = frozenset(["days", "weeks"])

    def __init__(self, default_hour: int | None = None):
        """Initialize the resolver.

        Args:
            default_hour: Hour applied to day-granular expressions given without
                a clock time. Defaults to settings.default_due_hour.
        """
        self.default_hour = settings.default_due_hour if default_hour is None else default_hour

    def resolve(self, text: str, now: datetime) -> datetime | None:
        match = self.find(text, now)
        return match.due_at if match else None

    def find(self, text: str, now: datetime) -> DateMatch | None:
        """Resolve the first date expression in ``text`` relative to ``now``.

        Returns:
            DateMatch, or None when the text has nothing date-like in it

        Raises:
            UnresolvableDateError: If a clock time is out of range (e.g. "25:00")
        """
        clock = self._find_clock(text)
        base = self._find_base(text, now, clock)

        if base is None:
            if clock is None:
                return None
            base_dt, spans, day_granular = now, [], False
        else:
            base_dt, spans, day_granular = base

        if clock is not None:
            due_at = base_dt.replace(hour=clock.hour, minute=clock.minute, second=0, microsecond=0)
            spans.append(clock.span)
        elif day_granular:
            due_at = base_dt.replace(hour=self.default_hour, minute=0, second=0, microsecond=0)
        else:
            due_at = base_dt

        logger.debug(f"Resolved due date {due_at.isoformat()} from {text!r}")
        return DateMatch(due_at=due_at, spans=tuple(sorted(spans)), has_time=clock is not None)

    def _find_base(
        self, text: str, now: datetime, clock: ClockTime | None
    ) -> tuple[datetime, list[Span], bool] | None:
        match = self.DAY_AFTER_TOMORROW_PATTERN.search(text)
        if match:
            return now + timedelta(days=2), [match.span()], True

        match = self.TOMORROW_PATTERN.search(text)
        if match:
            return now + timedelta(days=1), [match.span()], True

        match = self.RELATIVE_PATTERN.search(text)
        if match:
            unit = self._unit_for(match.group(2))
            try:
                base = now + timedelta(**{unit: int(match.group(1))})
            except (OverflowError, ValueError):
                raise UnresolvableDateError(
                    match.group(0), f"Offset {match.group(0)!r} is out of range"
                ) from None
            return base, [match.span()], unit in self.DAY_GRANULAR_UNITS

        match = self.TODAY_PATTERN.search(text)
        if match:
            return now, [match.span()], True

        match = self.WEEKDAY_PATTERN.search(text)
        if match:
            weekday = self._weekday_for(match.group(1) or match.group(2))
            return self._next_weekday(now, weekday, clock), [match.span()], True

        return None

    def _find_clock(self, text: str) -> ClockTime | None:
        match = self.CLOCK_PATTERN.search(text)
        if not match:
            return None

        hour = int(match.group(1))
        minute = int(match.group(2))
        if hour > 23 or minute > 59:
            raise UnresolvableDateError(
                f"{match.group(1)}:{match.group(2)}",
                f"Clock time {match.group(1)}:{match.group(2)} is out of range",
            )
        return ClockTime(hour=hour, minute=minute, span=match.span())

    def _next_weekday(self, now: datetime, weekday: int, clock: ClockTime | None) -> datetime:
        """Next occurrence of ``weekday``.

        Today only counts when a clock time is given and is still ahead of now.
        """
        days_ahead = (weekday - now.weekday()) % 7
        if days_ahead == 0:
            still_ahead = (
                clock is not None
                and now.replace(hour=clock.hour, minute=clock.minute, second=0, microsecond=0)
                > now
            )
            if not still_ahead:
                days_ahead = 7
        return now + timedelta(days=days_ahead)

    def _weekday_for(self, word: str) -> int:
        word = word.lower()
        for prefix, weekday in self.WEEKDAY_PREFIXES.items():
            if word.startswith(prefix):
                return weekday
        raise UnresolvableDateError(word)

    def _unit_for(self, word: str) -> str:
        word = word.lower()
        for prefix, unit in self.UNIT_PREFIXES.items():
            if word.startswith(prefix):
                return unit
        raise UnresolvableDateError(word)
