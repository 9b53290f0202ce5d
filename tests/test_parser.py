"""Tests for TextIntentParser."""

from datetime import datetime

import pytest

from tasktracker.services.errors import (
    EmptyInputError,
    EmptyTitleError,
    FailureReason,
    InvalidPriorityRangeError,
    UnresolvableDateError,
)
from tasktracker.services.intent import ParsedTaskIntent
from tasktracker.services.parser import TextIntentParser, is_valid, validate

NOW = datetime(2026, 1, 1, 10, 0)


class TestTextIntentParser:
    def setup_method(self):
        self.parser = TextIntentParser(timezone="UTC", default_hour=9)

    def test_parse_full_russian_message(self):
        """Title, due date and priority are all extracted from a Russian message."""
        result = self.parser.parse("Купить молоко завтра в 15:00, приоритет 8", NOW)
        assert result.title == "Купить молоко"
        assert result.priority == 8
        assert result.due_at == datetime(2026, 1, 2, 15, 0)
        assert result.urgent is False

    def test_parse_urgent_without_date(self):
        """An urgency keyword sets urgent and leaves the due date empty."""
        result = self.parser.parse("Срочное совещание", NOW)
        assert result.urgent is True
        assert result.priority == 5
        assert result.due_at is None
        assert result.title == "совещание"

    def test_parse_relative_days_with_urgency(self):
        """A relative offset and an urgency keyword are both removed from the title."""
        result = self.parser.parse("Подготовить отчет через 3 дня, срочно", NOW)
        assert result.title == "Подготовить отчет"
        assert result.urgent is True
        assert result.due_at == datetime(2026, 1, 4, 9, 0)

    def test_parse_today_with_importance(self):
        """The "важность" marker sets priority."""
        result = self.parser.parse("Встреча в 14:00 сегодня, важность 7", NOW)
        assert result.title == "Встреча"
        assert result.priority == 7
        assert result.due_at == datetime(2026, 1, 1, 14, 0)

    def test_parse_english_message(self):
        """English weekday, clock time and priority are extracted."""
        result = self.parser.parse("Call the bank on Friday at 10:30, priority 6", NOW)
        assert result.title == "Call the bank"
        assert result.priority == 6
        assert result.due_at == datetime(2026, 1, 2, 10, 30)

    def test_plain_text_gets_defaults(self):
        """Plain text keeps default priority, no urgency and no due date."""
        result = self.parser.parse("Купить молоко", NOW)
        assert result.title == "Купить молоко"
        assert result.priority == 5
        assert result.urgent is False
        assert result.due_at is None

    def test_high_priority_is_not_urgent(self):
        """A high priority alone does not make a task urgent."""
        result = self.parser.parse("Отчет для директора, приоритет 10", NOW)
        assert result.priority == 10
        assert result.urgent is False

    def test_priority_is_clamped(self):
        """Out-of-range priorities are clamped to 0-10."""
        assert self.parser.parse("Отчет priority 15", NOW).priority == 10
        assert self.parser.parse("Отчет priority -5", NOW).priority == 0

    def test_description_defaults_to_empty_and_raw_text_kept(self):
        """Description is empty and the raw text is kept."""
        text = "Купить молоко завтра"
        result = self.parser.parse(text, NOW)
        assert result.description == ""
        assert result.raw_text == text

    def test_deterministic_for_same_input_and_now(self):
        """The same text and now give the same intent."""
        text = "Позвонить маме в пятницу в 18:00, срочно"
        assert self.parser.parse(text, NOW) == self.parser.parse(text, NOW)

    def test_title_never_contains_markers(self):
        """Consumed markers never appear in the title."""
        result = self.parser.parse("срочно купить билеты послезавтра в 07:30, важность 9", NOW)
        assert result.title == "купить билеты"
        for marker in ("срочно", "послезавтра", "07:30", "важность"):
            assert marker not in result.title

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_input_raises(self, text):
        """Empty or blank input raises EmptyInputError."""
        with pytest.raises(EmptyInputError) as exc_info:
            self.parser.parse(text, NOW)
        assert exc_info.value.reason is FailureReason.EMPTY_INPUT

    @pytest.mark.parametrize("text", ["приоритет 8", "завтра в 10:00", "срочно, сегодня"])
    def test_only_markers_raises_empty_title(self, text):
        """Text made only of markers raises EmptyTitleError."""
        with pytest.raises(EmptyTitleError) as exc_info:
            self.parser.parse(text, NOW)
        assert exc_info.value.reason is FailureReason.EMPTY_TITLE

    def test_malformed_time_raises(self):
        """An impossible clock time raises UnresolvableDateError."""
        with pytest.raises(UnresolvableDateError) as exc_info:
            self.parser.parse("Позвонить в 25:00", NOW)
        assert exc_info.value.reason is FailureReason.UNRESOLVABLE_DATE

    @pytest.mark.parametrize(
        "text",
        [
            "Отчет через 99999999 дней",
            "Report in 9999999999 days",
            "Report in 9999999999999 minutes",
        ],
    )
    def test_huge_offset_raises_unresolvable_date(self, text):
        """An offset past the calendar's range should fail as an unresolvable date."""
        with pytest.raises(UnresolvableDateError) as exc_info:
            self.parser.parse(text, NOW)
        assert exc_info.value.reason is FailureReason.UNRESOLVABLE_DATE

    def test_environment_noun_is_not_wednesday(self):
        """The noun "среду" without a preposition should stay in the title."""
        result = self.parser.parse("Настроить среду разработки", NOW)
        assert result.title == "Настроить среду разработки"
        assert result.due_at is None

    def test_now_uses_configured_timezone(self):
        """now() is aware and in the configured timezone."""
        now = self.parser.now()
        assert now.tzinfo is not None
        assert now.utcoffset().total_seconds() == 0


class TestValidation:
    def test_valid_intent(self):
        """An intent with a title and an in-range priority is valid."""
        assert is_valid(ParsedTaskIntent(title="Купить молоко", priority=5)) is True

    def test_none_is_invalid(self):
        """None is not a valid intent."""
        assert is_valid(None) is False

    def test_empty_title_is_invalid(self):
        """An empty title fails validation."""
        intent = ParsedTaskIntent(title="")
        assert is_valid(intent) is False
        with pytest.raises(EmptyTitleError):
            validate(intent)

    @pytest.mark.parametrize("priority", [-1, 11])
    def test_out_of_range_priority_is_invalid(self, priority):
        """A priority outside 0-10 fails validation."""
        intent = ParsedTaskIntent(title="Отчет", priority=priority)
        assert is_valid(intent) is False
        with pytest.raises(InvalidPriorityRangeError) as exc_info:
            validate(intent)
        assert exc_info.value.reason is FailureReason.INVALID_PRIORITY_RANGE

    def test_intent_is_immutable(self):
        """ParsedTaskIntent cannot be modified."""
        intent = ParsedTaskIntent(title="Отчет")
        with pytest.raises(AttributeError):
            intent.title = "Другое"  # type: ignore[misc]
