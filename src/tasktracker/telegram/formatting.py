"""Render tasks, statistics and parse failures as Telegram messages."""

from datetime import datetime

from tasktracker.services.errors import FailureReason, IntentValidationError
from tasktracker.services.recurrence import RecurrenceKind, RecurrencePolicy
from tasktracker.services.tasks import Task, TaskStatistics

DATE_FORMAT = "%d.%m.%Y %H:%M"

START_TEXT = (
    "👋 Привет! Я бот для управления задачами.\n\n"
    "Отправь сообщение с описанием задачи, и я создам её.\n\n"
    "Команды:\n"
    "/list - последние задачи\n"
    "/today - задачи на сегодня\n"
    "/overdue - просроченные задачи\n"
    "/stats - статистика задач\n"
    "/done ID - завершить задачу\n"
    "/repeat ID daily|weekly|monthly|N|none - повтор задачи\n"
    "/help - справка"
)

HELP_TEXT = (
    "📋 Справка\n\n"
    "Примеры:\n"
    "• Купить молоко завтра в 15:00, приоритет 8\n"
    "• Подготовить отчет через 3 дня, срочно\n"
    "• Встреча в 14:00 сегодня, важность 7\n"
    "• Call the bank on Friday at 10:30, priority 6\n\n"
    "Я распознаю:\n"
    "📅 Даты: сегодня, завтра, послезавтра, через N дней/часов/минут, дни недели, HH:MM\n"
    "🔴 Приоритет: 0-10 (по умолчанию 5)\n"
    "⚡ Срочность: срочно, немедленно, экстренно, urgent, asap\n\n"
    "🔁 Повтор: /repeat 3 weekly, /repeat 3 ежемесячно, /repeat 3 10 (каждые 10 дней), /repeat 3 none"
)

REPEAT_USAGE_TEXT = "Использование: /repeat ID daily|weekly|monthly|N|none"

FAILURE_MESSAGES = {
    FailureReason.EMPTY_INPUT: "❌ Пустое сообщение. Опиши задачу текстом.",
    FailureReason.UNRESOLVABLE_DATE: "❌ Не удалось разобрать дату или время: {detail}",
    FailureReason.EMPTY_TITLE: "❌ Не удалось выделить название задачи. Добавь, что нужно сделать.",
    FailureReason.INVALID_PRIORITY_RANGE: "❌ Приоритет должен быть от 0 до 10.",
    FailureReason.INVALID_RECURRENCE_PRECONDITION: "❌ У задачи нет повторения.",
}


def format_due(due_at: datetime | None) -> str:
    if due_at is None:
        return "не установлена"
    return due_at.strftime(DATE_FORMAT)


def _urgent_suffix(task: Task, label: str = " ⚡ СРОЧНО") -> str:
    return label if task.urgent else ""


def format_task_created(task: Task) -> str:
    return (
        "✅ Задача создана!\n\n"
        f"📝 {task.title}\n"
        f"📅 Срок: {format_due(task.due_at)}\n"
        f"🔴 Приоритет: {task.priority}{_urgent_suffix(task)}\n"
        f"🆔 ID: {task.id}"
    )


def format_task_brief(task: Task) -> str:
    return (
        f"#{task.id} {task.title} {format_due(task.due_at)} "
        f"| Приоритет: {task.priority}{_urgent_suffix(task, ' ⚡')}"
    )


def format_task_list(header: str, tasks: list[Task], empty_text: str) -> str:
    if not tasks:
        return empty_text
    lines = [f"{header} ({len(tasks)}):", ""]
    lines.extend(format_task_brief(task) for task in tasks)
    return "\n".join(lines)


def format_task_completed(task: Task, follow_up: Task | None) -> str:
    text = f"✅ Задача #{task.id} завершена: {task.title}"
    if follow_up is not None:
        text += (
            f"\n🔁 {task.recurrence.kind.display_name}: "
            f"следующая #{follow_up.id} на {format_due(follow_up.due_at)}"
        )
    return text


def format_statistics(stats: TaskStatistics) -> str:
    return (
        "📊 Статистика задач:\n\n"
        f"📈 Всего: {stats.total}\n"
        f"🔵 Активных: {stats.active}\n"
        f"✅ Завершено: {stats.completed}\n"
        f"⚠️ Просроченных: {stats.overdue}"
    )


def format_failure(error: IntentValidationError) -> str:
    template = FAILURE_MESSAGES.get(error.reason, "❌ Не удалось разобрать задачу.")
    return template.format(detail=getattr(error, "expression", error.message))


def format_recurrence(policy: RecurrencePolicy) -> str:
    if policy.kind is RecurrenceKind.CUSTOM:
        return f"каждые {policy.effective_interval_days} дн."
    return policy.kind.display_name


def format_recurrence_set(task: Task) -> str:
    return f"🔁 Задача #{task.id} {task.title}: {format_recurrence(task.recurrence)}"
