"""Sentry error tracking for the task tracker.

Usage:
    from tasktracker.sentry import init_sentry
    init_sentry(settings.sentry_dsn, environment=settings.sentry_environment)

    # In Telegram handlers
    set_user_context(chat_id=message.chat.id, username=message.from_user.username)

Validation failures of user input (IntentValidationError and subclasses) are
expected and never sent as events.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from tasktracker.services.errors import IntentValidationError

if TYPE_CHECKING:
    from sentry_sdk._types import Event, Hint

logger = logging.getLogger(__name__)

_initialized = False

SENSITIVE_KEYS = frozenset([
    "token",
    "api_key",
    "secret",
    "password",
    "authorization",
    "bearer",
    "telegram_bot_token",
    "sentry_dsn",
])


def init_sentry(
    dsn: str | None = None,
    environment: str = "production",
    release: str | None = None,
    traces_sample_rate: float = 0.0,
) -> bool:
    """Initialize the Sentry SDK.

    Args:
        dsn: Sentry DSN. Empty or None disables Sentry.
        environment: Environment name (production, development).
        release: Release string, defaults to the installed package version.
        traces_sample_rate: Sample rate for performance tracing (0.0-1.0).

    Returns:
        True if Sentry was initialized, False if skipped.
    """
    global _initialized

    if _initialized:
        logger.debug("Sentry already initialized")
        return True

    if not dsn:
        logger.info("No SENTRY_DSN configured, error tracking disabled")
        return False

    if release is None:
        from tasktracker import __version__

        release = f"task-tracker@{__version__}"

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        send_default_pii=False,
        attach_stacktrace=True,
        before_send=_before_send,
    )

    _initialized = True
    logger.info(f"Sentry initialized: environment={environment}, release={release}")
    return True


def _before_send(event: Event, hint: Hint) -> Event | None:
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]
        if isinstance(exc_value, IntentValidationError):
            return None

    if "extra" in event:
        _scrub_dict(cast(dict[str, Any], event["extra"]))

    if "breadcrumbs" in event:
        breadcrumbs = cast(dict[str, Any], event["breadcrumbs"])
        for breadcrumb in breadcrumbs.get("values", []):
            if "data" in breadcrumb:
                _scrub_dict(breadcrumb["data"])

    return event


def _scrub_dict(data: dict[str, Any]) -> None:
    """Redact sensitive keys in place, recursing into nested dicts."""
    for key in list(data.keys()):
        if key.lower() in SENSITIVE_KEYS:
            data[key] = "[REDACTED]"
        elif isinstance(data[key], dict):
            _scrub_dict(data[key])


def set_user_context(chat_id: int | str | None = None, username: str | None = None) -> None:
    if not _initialized:
        return

    user_data: dict[str, Any] = {}
    if chat_id is not None:
        user_data["id"] = str(chat_id)
    if username is not None:
        user_data["username"] = username

    if user_data:
        sentry_sdk.set_user(user_data)


def add_breadcrumb(
    message: str,
    category: str = "default",
    level: str = "info",
    data: dict[str, Any] | None = None,
) -> None:
    if not _initialized:
        return

    sentry_sdk.add_breadcrumb(message=message, category=category, level=level, data=data or {})


def capture_exception(exception: BaseException | None = None) -> str | None:
    """Send an exception to Sentry. Returns the event id, or None when disabled."""
    if not _initialized:
        return None

    return sentry_sdk.capture_exception(exception)


def flush(timeout: float = 2.0) -> None:
    if not _initialized:
        return

    sentry_sdk.flush(timeout=timeout)


def is_enabled() -> bool:
    return _initialized
