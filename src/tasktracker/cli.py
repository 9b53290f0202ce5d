import argparse
import asyncio
import logging
import sys
from datetime import datetime

from tasktracker.config import settings
from tasktracker.sentry import flush as sentry_flush
from tasktracker.sentry import init_sentry
from tasktracker.services.errors import IntentValidationError
from tasktracker.services.parser import TextIntentParser


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def run_bot() -> None:
    from tasktracker.telegram import TaskTrackerBot

    if not settings.has_telegram:
        print("Error: TELEGRAM_BOT_TOKEN not configured")
        print("Set it in .env file or as environment variable")
        sys.exit(1)

    bot = TaskTrackerBot()
    await bot.start()


def parse_text(text: str, now_iso: str | None = None) -> int:
    """Print the intent parsed from ``text``. Returns a process exit code."""
    parser = TextIntentParser()
    now = datetime.fromisoformat(now_iso) if now_iso else parser.now()

    try:
        intent = parser.parse(text, now)
    except IntentValidationError as e:
        print(f"Error [{e.reason.value}]: {e.message}")
        return 2

    print(f"Title:    {intent.title}")
    print(f"Due:      {intent.due_at.isoformat() if intent.due_at else '-'}")
    print(f"Priority: {intent.priority}")
    print(f"Urgent:   {'yes' if intent.urgent else 'no'}")
    return 0


def check_config() -> None:
    print("Task Tracker Configuration Check\n")

    checks = [
        ("Telegram Bot Token", settings.has_telegram),
        ("User Telegram Chat ID", bool(settings.user_telegram_chat_id)),
        ("Sentry DSN", settings.has_sentry),
    ]

    for name, configured in checks:
        status = "OK" if configured else "MISSING"
        symbol = "+" if configured else "-"
        print(f"  [{symbol}] {name}: {status}")

    print(f"\n  Timezone: {settings.user_timezone}")
    print(f"  Default due hour: {settings.default_due_hour:02d}:00")
    print(f"  Task file: {settings.tasks_path}")

    print()
    if settings.has_telegram:
        print("Required configuration present. Ready to run.")
    else:
        print("Missing required configuration. See .env.example for setup.")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="tasktracker",
        description="Personal task tracker with natural-language intake",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the Telegram bot")

    parse_cmd = subparsers.add_parser("parse", help="Parse a task description")
    parse_cmd.add_argument("text", help="Free-form task text")
    parse_cmd.add_argument("--now", help="Reference time in ISO format (default: current time)")

    subparsers.add_parser("check", help="Check configuration")

    args = parser.parse_args(argv)

    setup_logging()
    init_sentry(settings.sentry_dsn, environment=settings.sentry_environment)

    try:
        if args.command == "run":
            asyncio.run(run_bot())
        elif args.command == "parse":
            sys.exit(parse_text(args.text, args.now))
        elif args.command == "check":
            check_config()
        else:
            parser.print_help()
    finally:
        sentry_flush()


if __name__ == "__main__":
    main()
