"""Next-occurrence scheduling for recurring tasks."""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from tasktracker.services.errors import InvalidRecurrencePreconditionError


class RecurrenceKind(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    RecurrenceKind.NONE: "Без повтора",
    RecurrenceKind.DAILY: "Ежедневно",
    RecurrenceKind.WEEKLY: "Еженедельно",
    RecurrenceKind.MONTHLY: "Ежемесячно",
    RecurrenceKind.CUSTOM: "Произвольный период",
}

CUSTOM_FALLBACK_DAYS = 7
MAX_CUSTOM_INTERVAL_DAYS = 3650

_KEYWORDS = {
    "none": RecurrenceKind.NONE,
    "нет": RecurrenceKind.NONE,
    "daily": RecurrenceKind.DAILY,
    "ежедневно": RecurrenceKind.DAILY,
    "weekly": RecurrenceKind.WEEKLY,
    "еженедельно": RecurrenceKind.WEEKLY,
    "monthly": RecurrenceKind.MONTHLY,
    "ежемесячно": RecurrenceKind.MONTHLY,
}


@dataclass(frozen=True)
class RecurrencePolicy:
    kind: RecurrenceKind = RecurrenceKind.NONE
    interval_days: int = 0  # only meaningful for CUSTOM

    @property
    def has_recurrence(self) -> bool:
        return self.kind is not RecurrenceKind.NONE

    @property
    def effective_interval_days(self) -> int:
        """Day step for CUSTOM; non-positive intervals fall back to a week."""
        if self.interval_days <= 0:
            return CUSTOM_FALLBACK_DAYS
        return self.interval_days

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "interval_days": self.interval_days}

    @classmethod
    def from_dict(cls, d: dict | None) -> "RecurrencePolicy":
        if not d:
            return cls()
        return cls(kind=RecurrenceKind(d["kind"]), interval_days=d.get("interval_days", 0))

    @classmethod
    def from_keyword(cls, word: str) -> "RecurrencePolicy | None":
        """Policy for a user keyword: daily, weekly, monthly, none or a day count.

        Returns None when the keyword is not recognized.
        """
        word = word.strip().lower()
        if word.isascii() and word.isdigit() and len(word) <= 4:
            days = int(word)
            if not 0 < days <= MAX_CUSTOM_INTERVAL_DAYS:
                return None
            return cls(kind=RecurrenceKind.CUSTOM, interval_days=days)
        kind = _KEYWORDS.get(word)
        return cls(kind=kind) if kind is not None else None


NO_RECURRENCE = RecurrencePolicy()


def add_months(value: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's end.

    Jan 31 + 1 month is Feb 28 (Feb 29 in leap years), never Mar 3.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


class RecurrenceScheduler:
    def next_occurrence(self, reference_due_at: datetime, policy: RecurrencePolicy) -> datetime:
        """Compute the due date of the task that follows ``reference_due_at``.

        Raises:
            InvalidRecurrencePreconditionError: If the policy kind is NONE
        """
        kind = policy.kind
        if kind is RecurrenceKind.DAILY:
            return reference_due_at + timedelta(days=1)
        if kind is RecurrenceKind.WEEKLY:
            return reference_due_at + timedelta(weeks=1)
        if kind is RecurrenceKind.MONTHLY:
            return add_months(reference_due_at, 1)
        if kind is RecurrenceKind.CUSTOM:
            return reference_due_at + timedelta(days=policy.effective_interval_days)
        raise InvalidRecurrencePreconditionError(
            "next_occurrence called for a task without recurrence; check has_recurrence first"
        )

    @staticmethod
    def reference_for(due_at: datetime | None, now: datetime) -> datetime:
        """Reference point for the next occurrence: the due date, or now if there was none."""
        return due_at if due_at is not None else now
