"""Typed validation failures raised by the parsing and recurrence services.

Every failure carries a machine-readable ``reason`` so collaborators (the
Telegram gateway, the CLI) can tell them apart without inspecting messages.
"""

from enum import Enum


class FailureReason(str, Enum):
    """Why a text could not become a task intent."""

    EMPTY_INPUT = "empty_input"
    UNRESOLVABLE_DATE = "unresolvable_date"
    EMPTY_TITLE = "empty_title"
    INVALID_PRIORITY_RANGE = "invalid_priority_range"
    INVALID_RECURRENCE_PRECONDITION = "invalid_recurrence_precondition"


class IntentValidationError(ValueError):
    """Base class for local validation failures."""

    reason: FailureReason

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyInputError(IntentValidationError):
    reason = FailureReason.EMPTY_INPUT

    def __init__(self, message: str = "Input text is empty"):
        super().__init__(message)


class UnresolvableDateError(IntentValidationError):
    """A date-like expression was present but could not be turned into a time."""

    reason = FailureReason.UNRESOLVABLE_DATE

    def __init__(self, expression: str, message: str | None = None):
        super().__init__(message or f"Cannot resolve date expression: {expression!r}")
        self.expression = expression


class EmptyTitleError(IntentValidationError):
    reason = FailureReason.EMPTY_TITLE

    def __init__(self, raw_text: str = ""):
        super().__init__("Title is empty after removing recognized markers")
        self.raw_text = raw_text


class InvalidPriorityRangeError(IntentValidationError):
    reason = FailureReason.INVALID_PRIORITY_RANGE

    def __init__(self, priority: int):
        super().__init__(f"Priority {priority} is outside the 0-10 range")
        self.priority = priority


class InvalidRecurrencePreconditionError(IntentValidationError):
    """The scheduler was asked for the next occurrence of a non-recurring task."""

    reason = FailureReason.INVALID_RECURRENCE_PRECONDITION

    def __init__(self, message: str = "Task has no recurrence policy"):
        super().__init__(message)


class TaskNotFoundError(KeyError):
    """Raised by the task store for unknown task ids."""

    def __init__(self, task_id: int):
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"Task {self.task_id} not found"
