"""Telegram message handlers.

Free text becomes a task through TextIntentParser and TaskStore; commands
query and update the store. Voice messages are not handled.
"""

import logging

from aiogram import Dispatcher, F, Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import Message

from tasktracker.sentry import add_breadcrumb, capture_exception, set_user_context
from tasktracker.services.errors import IntentValidationError, TaskNotFoundError
from tasktracker.services.parser import TextIntentParser
from tasktracker.services.recurrence import RecurrencePolicy
from tasktracker.services.store import TaskStore, get_task_store
from tasktracker.telegram.formatting import (
    HELP_TEXT,
    REPEAT_USAGE_TEXT,
    START_TEXT,
    format_failure,
    format_recurrence_set,
    format_statistics,
    format_task_completed,
    format_task_created,
    format_task_list,
)

logger = logging.getLogger(__name__)

router = Router()

# Parser instance (created lazily)
_parser: TextIntentParser | None = None


def get_parser() -> TextIntentParser:
    """Get or create TextIntentParser instance."""
    global _parser
    if _parser is None:
        _parser = TextIntentParser()
    return _parser


def get_store() -> TaskStore:
    return get_task_store()


def setup_handlers(dp: Dispatcher) -> None:
    """Set up message handlers on the dispatcher."""
    dp.include_router(router)


# === Command Handlers ===


@router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    await message.answer(START_TEXT)


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT)


@router.message(Command("list"))
async def cmd_list(message: Message) -> None:
    tasks = get_store().latest(5)
    await message.answer(format_task_list("📋 Последние задачи", tasks, "📭 Задач нет"))


@router.message(Command("today"))
async def cmd_today(message: Message) -> None:
    now = get_parser().now()
    tasks = get_store().for_today(now)
    await message.answer(format_task_list("📅 Задачи на сегодня", tasks, "✅ Задач на сегодня нет"))


@router.message(Command("overdue"))
async def cmd_overdue(message: Message) -> None:
    now = get_parser().now()
    tasks = get_store().overdue(now)
    await message.answer(
        format_task_list("⚠️ Просроченные задачи", tasks, "✅ Просроченных задач нет")
    )


@router.message(Command("stats"))
async def cmd_stats(message: Message) -> None:
    now = get_parser().now()
    await message.answer(format_statistics(get_store().statistics(now)))


@router.message(Command("done"))
async def cmd_done(message: Message, command: CommandObject) -> None:
    """Handle /done ID - complete a task and schedule its next occurrence."""
    args = (command.args or "").strip().lstrip("#")
    if not args.isdecimal():
        await message.answer("Использование: /done ID")
        return

    task_id = int(args)
    now = get_parser().now()
    store = get_store()
    try:
        follow_up = store.complete(task_id, now)
    except TaskNotFoundError:
        await message.answer(f"❌ Задача #{task_id} не найдена")
        return

    await message.answer(format_task_completed(store.get(task_id), follow_up))


@router.message(Command("repeat"))
async def cmd_repeat(message: Message, command: CommandObject) -> None:
    """Handle /repeat ID daily|weekly|monthly|N|none - set a task's recurrence."""
    parts = (command.args or "").split()
    if len(parts) != 2 or not parts[0].lstrip("#").isdecimal():
        await message.answer(REPEAT_USAGE_TEXT)
        return

    policy = RecurrencePolicy.from_keyword(parts[1])
    if policy is None:
        await message.answer(REPEAT_USAGE_TEXT)
        return

    task_id = int(parts[0].lstrip("#"))
    try:
        task = get_store().update_task(task_id, get_parser().now(), recurrence=policy)
    except TaskNotFoundError:
        await message.answer(f"❌ Задача #{task_id} не найдена")
        return

    await message.answer(format_recurrence_set(task))


# === Text Handler ===


@router.message(F.text)
async def handle_text(message: Message) -> None:
    """Handle free text: parse it into a task intent and store it."""
    text = message.text or ""

    if text.startswith("/"):
        await message.answer("❓ Неизвестная команда. Введи /help для справки.")
        return

    if message.from_user is not None:
        set_user_context(chat_id=message.chat.id, username=message.from_user.username)

    logger.info(f"Received text message: '{text[:50]}'")
    add_breadcrumb("Text message received", category="telegram", data={"length": len(text)})

    parser = get_parser()
    now = parser.now()

    try:
        intent = parser.parse(text, now)
    except IntentValidationError as e:
        logger.info(f"Could not parse message ({e.reason.value}): {e.message}")
        await message.answer(format_failure(e))
        return

    try:
        task = get_store().create_from_intent(intent, now)
    except Exception as e:
        logger.exception(f"Task creation failed: {e}")
        capture_exception(e)
        await message.answer("❌ Не удалось создать задачу.")
        return

    await message.answer(format_task_created(task))
