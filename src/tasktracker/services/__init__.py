"""Task tracker services.

Text intent parsing, recurrence scheduling and task storage. Imports are lazy
so that importing one service does not pull in the others.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS: dict[str, tuple[str, str]] = {
    # Intent
    "ParsedTaskIntent": ("tasktracker.services.intent", "ParsedTaskIntent"),
    # Extractors
    "PriorityExtractor": ("tasktracker.services.priority", "PriorityExtractor"),
    "UrgencyDetector": ("tasktracker.services.urgency", "UrgencyDetector"),
    "RelativeDateResolver": ("tasktracker.services.dates", "RelativeDateResolver"),
    "TitleSanitizer": ("tasktracker.services.sanitizer", "TitleSanitizer"),
    # Parser
    "TextIntentParser": ("tasktracker.services.parser", "TextIntentParser"),
    "is_valid": ("tasktracker.services.parser", "is_valid"),
    "validate": ("tasktracker.services.parser", "validate"),
    # Recurrence
    "RecurrenceKind": ("tasktracker.services.recurrence", "RecurrenceKind"),
    "RecurrencePolicy": ("tasktracker.services.recurrence", "RecurrencePolicy"),
    "RecurrenceScheduler": ("tasktracker.services.recurrence", "RecurrenceScheduler"),
    # Tasks
    "Task": ("tasktracker.services.tasks", "Task"),
    "TaskStatistics": ("tasktracker.services.tasks", "TaskStatistics"),
    "TaskStatus": ("tasktracker.services.tasks", "TaskStatus"),
    "TaskStore": ("tasktracker.services.store", "TaskStore"),
    "get_task_store": ("tasktracker.services.store", "get_task_store"),
    # Errors
    "FailureReason": ("tasktracker.services.errors", "FailureReason"),
    "IntentValidationError": ("tasktracker.services.errors", "IntentValidationError"),
    "EmptyInputError": ("tasktracker.services.errors", "EmptyInputError"),
    "UnresolvableDateError": ("tasktracker.services.errors", "UnresolvableDateError"),
    "EmptyTitleError": ("tasktracker.services.errors", "EmptyTitleError"),
    "InvalidPriorityRangeError": ("tasktracker.services.errors", "InvalidPriorityRangeError"),
    "InvalidRecurrencePreconditionError": (
        "tasktracker.services.errors",
        "InvalidRecurrencePreconditionError",
    ),
    "TaskNotFoundError": ("tasktracker.services.errors", "TaskNotFoundError"),
}

__all__ = list(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = _EXPORTS[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))
