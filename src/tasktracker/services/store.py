"""JSON-file task store.

Creates tasks from parsed intents and spawns the follow-up task when a
recurring task is completed. The whole store is one JSON document at
``settings.tasks_path``, rewritten on every change.
"""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

from tasktracker.config import settings
from tasktracker.services.errors import (
    EmptyTitleError,
    InvalidPriorityRangeError,
    TaskNotFoundError,
)
from tasktracker.services.intent import (
    DEFAULT_PRIORITY,
    MAX_PRIORITY,
    MIN_PRIORITY,
    ParsedTaskIntent,
)
from tasktracker.services.parser import validate
from tasktracker.services.recurrence import (
    NO_RECURRENCE,
    RecurrencePolicy,
    RecurrenceScheduler,
)
from tasktracker.services.tasks import (
    Task,
    TaskStatistics,
    TaskStatus,
    is_active,
    is_due_today,
    is_overdue,
)

logger = logging.getLogger(__name__)


class TaskStore:
    """Persists tasks in a single JSON file."""

    IMPORTANT_PRIORITY_THRESHOLD = 5

    def __init__(self, path: Path | None = None, scheduler: RecurrenceScheduler | None = None):
        self.path = path or settings.tasks_path
        self.scheduler = scheduler or RecurrenceScheduler()
        self._lock = threading.Lock()
        self._tasks: dict[int, Task] = {}
        self._next_id = 1
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        data = json.loads(self.path.read_text(encoding="utf-8"))
        for item in data.get("tasks", []):
            task = Task.from_dict(item)
            self._tasks[task.id] = task
        self._next_id = data.get("next_id", max(self._tasks, default=0) + 1)
        logger.info(f"Loaded {len(self._tasks)} tasks from {self.path}")

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data: dict[str, Any] = {
            "next_id": self._next_id,
            "tasks": [task.to_dict() for task in self._tasks.values()],
        }
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    # === Creation ===

    def _create_locked(
        self,
        title: str,
        now: datetime,
        description: str,
        due_at: datetime | None,
        priority: int,
        urgent: bool,
        recurrence: RecurrencePolicy,
    ) -> Task:
        """Add a task to the in-memory map. Caller holds the lock and saves."""
        task = Task(
            id=self._next_id,
            title=title,
            description=description,
            due_at=due_at,
            created_at=now,
            updated_at=now,
            status=TaskStatus.NEW,
            priority=priority,
            urgent=urgent,
            recurrence=recurrence,
        )
        self._tasks[task.id] = task
        self._next_id += 1
        return task

    def create_task(
        self,
        title: str,
        now: datetime,
        description: str = "",
        due_at: datetime | None = None,
        priority: int = DEFAULT_PRIORITY,
        urgent: bool = False,
        recurrence: RecurrencePolicy = NO_RECURRENCE,
    ) -> Task:
        with self._lock:
            task = self._create_locked(title, now, description, due_at, priority, urgent, recurrence)
            self._save()

        logger.info(f"Created task {task.id}: {task.title!r}")
        return task

    def create_from_intent(
        self,
        intent: ParsedTaskIntent,
        now: datetime,
        recurrence: RecurrencePolicy = NO_RECURRENCE,
    ) -> Task:
        validate(intent)
        return self.create_task(
            title=intent.title,
            now=now,
            description=intent.description,
            due_at=intent.due_at,
            priority=intent.priority,
            urgent=intent.urgent,
            recurrence=recurrence,
        )

    # === Updates ===

    def get(self, task_id: int) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    def update_status(self, task_id: int, status: TaskStatus, now: datetime) -> Task:
        with self._lock:
            task = self.get(task_id)
            task.status = status
            task.updated_at = now
            self._save()
        logger.info(f"Task {task_id} status -> {status.value}")
        return task

    def update_task(
        self,
        task_id: int,
        now: datetime,
        *,
        title: str | None = None,
        description: str | None = None,
        due_at: datetime | None = None,
        priority: int | None = None,
        urgent: bool | None = None,
        recurrence: RecurrencePolicy | None = None,
    ) -> Task:
        """Change the given fields of a task; fields left as None are kept.

        Raises:
            TaskNotFoundError: If there is no task with this id
            EmptyTitleError: If ``title`` is blank
            InvalidPriorityRangeError: If ``priority`` is outside 0-10
        """
        if title is not None and not title.strip():
            raise EmptyTitleError(title)
        if priority is not None and not MIN_PRIORITY <= priority <= MAX_PRIORITY:
            raise InvalidPriorityRangeError(priority)

        with self._lock:
            task = self.get(task_id)
            if title is not None:
                task.title = title.strip()
            if description is not None:
                task.description = description
            if due_at is not None:
                task.due_at = due_at
            if priority is not None:
                task.priority = priority
            if urgent is not None:
                task.urgent = urgent
            if recurrence is not None:
                task.recurrence = recurrence
            task.updated_at = now
            self._save()

        logger.info(f"Updated task {task_id}")
        return task

    def complete(self, task_id: int, now: datetime) -> Task | None:
        """Mark a task completed.

        Completing an already completed task is a no-op, so a repeated
        request never spawns a second follow-up.

        Returns:
            The newly created follow-up task for recurring tasks, else None
        """
        with self._lock:
            task = self.get(task_id)
            if task.status is TaskStatus.COMPLETED:
                return None

            next_due = None
            if task.has_recurrence:
                reference = self.scheduler.reference_for(task.due_at, now)
                next_due = self.scheduler.next_occurrence(reference, task.recurrence)

            task.status = TaskStatus.COMPLETED
            task.updated_at = now

            follow_up = None
            if next_due is not None:
                follow_up = self._create_locked(
                    title=task.title,
                    now=now,
                    description=task.description,
                    due_at=next_due,
                    priority=task.priority,
                    urgent=task.urgent,
                    recurrence=task.recurrence,
                )
            self._save()

        logger.info(f"Task {task_id} status -> {TaskStatus.COMPLETED.value}")
        if follow_up is not None:
            logger.info(
                f"Scheduled next occurrence of task {task_id} as {follow_up.id} at {follow_up.due_at}"
            )
        return follow_up

    def delete(self, task_id: int) -> None:
        with self._lock:
            self.get(task_id)
            del self._tasks[task_id]
            self._save()
        logger.info(f"Deleted task {task_id}")

    # === Queries ===

    def list_all(self) -> list[Task]:
        return list(self._tasks.values())

    def by_status(self, status: TaskStatus) -> list[Task]:
        return [task for task in self._tasks.values() if task.status is status]

    def active(self) -> list[Task]:
        return [task for task in self._tasks.values() if is_active(task)]

    def important(self) -> list[Task]:
        """Tasks with priority above 5, soonest due first, undated last."""
        tasks = [t for t in self._tasks.values() if t.priority > self.IMPORTANT_PRIORITY_THRESHOLD]
        return sorted(tasks, key=lambda t: (t.due_at is None, t.due_at or t.created_at))

    def for_today(self, now: datetime) -> list[Task]:
        return [
            task
            for task in self._tasks.values()
            if is_due_today(task, now) and task.status is not TaskStatus.CANCELLED
        ]

    def overdue(self, now: datetime) -> list[Task]:
        return [task for task in self._tasks.values() if is_overdue(task, now)]

    def by_date_range(self, start: datetime, end: datetime) -> list[Task]:
        """Tasks due within ``[start, end]``, soonest first."""
        tasks = [
            task
            for task in self._tasks.values()
            if task.due_at is not None and start <= task.due_at <= end
        ]
        return sorted(tasks, key=lambda t: (t.due_at, t.id))

    def latest(self, limit: int = 5) -> list[Task]:
        tasks = sorted(self._tasks.values(), key=lambda t: (t.created_at, t.id), reverse=True)
        return tasks[:limit]

    def search(self, keyword: str) -> list[Task]:
        if not keyword:
            return self.list_all()
        needle = keyword.lower()
        return [
            task
            for task in self._tasks.values()
            if needle in task.title.lower() or needle in task.description.lower()
        ]

    def statistics(self, now: datetime) -> TaskStatistics:
        return TaskStatistics(
            total=len(self._tasks),
            new=len(self.by_status(TaskStatus.NEW)),
            in_progress=len(self.by_status(TaskStatus.IN_PROGRESS)),
            completed=len(self.by_status(TaskStatus.COMPLETED)),
            cancelled=len(self.by_status(TaskStatus.CANCELLED)),
            active=len(self.active()),
            overdue=len(self.overdue(now)),
        )


_store: TaskStore | None = None


def get_task_store() -> TaskStore:
    """Get or create the shared TaskStore instance."""
    global _store
    if _store is None:
        _store = TaskStore()
    return _store
