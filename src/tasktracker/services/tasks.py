"""Task records and the date predicates computed over them.

Task is a plain data holder. Anything that depends on the current time is a
module-level function taking ``(task, now)``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from tasktracker.services.intent import DEFAULT_PRIORITY
from tasktracker.services.recurrence import NO_RECURRENCE, RecurrencePolicy


class TaskStatus(str, Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


CLOSED_STATUSES = frozenset([TaskStatus.COMPLETED, TaskStatus.CANCELLED])


@dataclass
class Task:
    id: int
    title: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    due_at: datetime | None = None
    status: TaskStatus = TaskStatus.NEW
    priority: int = DEFAULT_PRIORITY
    urgent: bool = False
    recurrence: RecurrencePolicy = field(default=NO_RECURRENCE)

    @property
    def has_recurrence(self) -> bool:
        return self.recurrence.has_recurrence

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "due_at": self.due_at.isoformat() if self.due_at else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "status": self.status.value,
            "priority": self.priority,
            "urgent": self.urgent,
            "recurrence": self.recurrence.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Task":
        due_at = d.get("due_at")
        return cls(
            id=d["id"],
            title=d["title"],
            description=d.get("description", ""),
            due_at=datetime.fromisoformat(due_at) if due_at else None,
            created_at=datetime.fromisoformat(d["created_at"]),
            updated_at=datetime.fromisoformat(d["updated_at"]),
            status=TaskStatus(d.get("status", TaskStatus.NEW.value)),
            priority=d.get("priority", DEFAULT_PRIORITY),
            urgent=d.get("urgent", False),
            recurrence=RecurrencePolicy.from_dict(d.get("recurrence")),
        )


@dataclass
class TaskStatistics:
    total: int = 0
    new: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0
    active: int = 0
    overdue: int = 0


def is_active(task: Task) -> bool:
    return task.status not in CLOSED_STATUSES


def is_overdue(task: Task, now: datetime) -> bool:
    if task.due_at is None:
        return False
    return task.due_at < now and is_active(task)


def is_due_today(task: Task, now: datetime) -> bool:
    return task.due_at is not None and task.due_at.date() == now.date()


def is_today_or_tomorrow(task: Task, now: datetime) -> bool:
    if task.due_at is None or not is_active(task):
        return False
    due_day = task.due_at.date()
    today = now.date()
    return due_day in (today, today + timedelta(days=1))


def is_this_week(task: Task, now: datetime) -> bool:
    """Due within the next seven days, excluding overdue and today/tomorrow tasks."""
    if task.due_at is None or not is_active(task):
        return False
    if is_overdue(task, now) or is_today_or_tomorrow(task, now):
        return False
    return task.due_at <= now + timedelta(days=7)
