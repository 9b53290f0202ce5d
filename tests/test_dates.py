"""Tests for relative date resolution.

The reference time is Thursday 2026-01-01 10:00.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from tasktracker.services.dates import RelativeDateResolver
from tasktracker.services.errors import FailureReason, UnresolvableDateError

NOW = datetime(2026, 1, 1, 10, 0)


class TestRelativeDays:
    def setup_method(self):
        self.resolver = RelativeDateResolver(default_hour=9)

    def test_tomorrow_with_time(self):
        """Tomorrow with a clock time lands on that time the next day."""
        assert self.resolver.resolve("завтра в 15:00", NOW) == datetime(2026, 1, 2, 15, 0)

    def test_tomorrow_without_time_uses_anchor_hour(self):
        """Tomorrow without a time uses the default due hour."""
        assert self.resolver.resolve("Купить молоко завтра", NOW) == datetime(2026, 1, 2, 9, 0)

    def test_english_tomorrow(self):
        """English "tomorrow at HH:MM" is recognized."""
        assert self.resolver.resolve("Call dentist tomorrow at 16:30", NOW) == datetime(
            2026, 1, 2, 16, 30
        )

    def test_day_after_tomorrow(self):
        """Day after tomorrow resolves two days ahead in both languages."""
        assert self.resolver.resolve("послезавтра", NOW) == datetime(2026, 1, 3, 9, 0)
        assert self.resolver.resolve("day after tomorrow at 8:15", NOW) == datetime(
            2026, 1, 3, 8, 15
        )

    def test_today_with_time(self):
        """Today with a clock time keeps today's date."""
        assert self.resolver.resolve("сегодня в 18:30", NOW) == datetime(2026, 1, 1, 18, 30)

    def test_today_without_time(self):
        """Today without a time uses the default due hour."""
        assert self.resolver.resolve("today", NOW) == datetime(2026, 1, 1, 9, 0)

    def test_anchor_hour_is_configurable(self):
        """The default due hour comes from the constructor."""
        resolver = RelativeDateResolver(default_hour=12)
        assert resolver.resolve("завтра", NOW) == datetime(2026, 1, 2, 12, 0)


class TestInNUnits:
    def setup_method(self):
        self.resolver = RelativeDateResolver(default_hour=9)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("через 3 дня", datetime(2026, 1, 4, 9, 0)),
            ("через 1 день", datetime(2026, 1, 2, 9, 0)),
            ("через 5 дней", datetime(2026, 1, 6, 9, 0)),
            ("in 2 days", datetime(2026, 1, 3, 9, 0)),
            ("через 2 недели", datetime(2026, 1, 15, 9, 0)),
            ("in 1 week", datetime(2026, 1, 8, 9, 0)),
        ],
    )
    def test_day_units_anchor_to_default_hour(self, text, expected):
        """Day and week offsets land on the default due hour."""
        assert self.resolver.resolve(text, NOW) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("in 2 hours", datetime(2026, 1, 1, 12, 0)),
            ("через 3 часа", datetime(2026, 1, 1, 13, 0)),
            ("через 30 минут", datetime(2026, 1, 1, 10, 30)),
            ("in 45 minutes", datetime(2026, 1, 1, 10, 45)),
        ],
    )
    def test_sub_day_units_keep_exact_instant(self, text, expected):
        """Hour and minute offsets keep the exact instant."""
        assert self.resolver.resolve(text, NOW) == expected

    def test_clock_time_overlays_relative_days(self):
        """A clock time replaces the time of a relative day offset."""
        assert self.resolver.resolve("через 3 дня в 11:00", NOW) == datetime(2026, 1, 4, 11, 0)

    @pytest.mark.parametrize(
        "text",
        [
            "через 99999999 дней",
            "in 9999999999 days",
            "in 9999999999999 minutes",
            "in " + "9" * 5000 + " days",
        ],
    )
    def test_offset_beyond_calendar_raises(self, text):
        """Offsets that overflow datetime should raise UnresolvableDateError."""
        with pytest.raises(UnresolvableDateError) as exc_info:
            self.resolver.resolve(text, NOW)
        assert exc_info.value.reason is FailureReason.UNRESOLVABLE_DATE
        assert exc_info.value.expression.startswith(text[:3])


class TestWeekdays:
    def setup_method(self):
        self.resolver = RelativeDateResolver(default_hour=9)

    def test_next_friday(self):
        """A weekday resolves to its next occurrence."""
        assert self.resolver.resolve("в пятницу", NOW) == datetime(2026, 1, 2, 9, 0)

    def test_russian_inflected_forms(self):
        """Inflected Russian weekday forms after a preposition are recognized."""
        assert self.resolver.resolve("во вторник", NOW) == datetime(2026, 1, 6, 9, 0)
        assert self.resolver.resolve("в среду", NOW) == datetime(2026, 1, 7, 9, 0)
        assert self.resolver.resolve("в воскресенье", NOW) == datetime(2026, 1, 4, 9, 0)

    def test_english_weekday(self):
        """English weekday with "on" is recognized."""
        assert self.resolver.resolve("on Monday", NOW) == datetime(2026, 1, 5, 9, 0)

    def test_same_weekday_without_time_is_next_week(self):
        """Today's weekday without a time means next week."""
        assert self.resolver.resolve("в четверг", NOW) == datetime(2026, 1, 8, 9, 0)

    def test_same_weekday_with_future_time_is_today(self):
        """Today's weekday with a time still ahead means today."""
        assert self.resolver.resolve("в четверг в 15:00", NOW) == datetime(2026, 1, 1, 15, 0)

    def test_same_weekday_with_past_time_is_next_week(self):
        """Today's weekday with a time already passed means next week."""
        assert self.resolver.resolve("в четверг в 08:00", NOW) == datetime(2026, 1, 8, 8, 0)

    @pytest.mark.parametrize(
        "text", ["Настроить среду разработки", "Среда выполнения", "изучить среды"]
    )
    def test_environment_noun_is_not_a_weekday(self, text):
        """The noun for environment is not read as Wednesday without a preposition."""
        assert self.resolver.find(text, NOW) is None

    def test_wednesday_with_preposition_is_consumed(self):
        """Wednesday after a preposition should resolve and report its span."""
        text = "Созвон в среду"
        match = self.resolver.find(text, NOW)
        assert match.due_at == datetime(2026, 1, 7, 9, 0)
        assert [text[s:e] for s, e in match.spans] == ["в среду"]

    def test_english_wednesday_needs_no_preposition(self):
        """English weekday names resolve with or without "on"."""
        assert self.resolver.resolve("Wednesday", NOW) == datetime(2026, 1, 7, 9, 0)


class TestClockTime:
    def setup_method(self):
        self.resolver = RelativeDateResolver(default_hour=9)

    def test_bare_time_is_today(self):
        """A bare clock time is placed on today's date."""
        assert self.resolver.resolve("Встреча в 16:45", NOW) == datetime(2026, 1, 1, 16, 45)

    def test_bare_past_time_does_not_roll_over(self):
        """A past bare clock time stays on today's date."""
        assert self.resolver.resolve("в 08:00", NOW) == datetime(2026, 1, 1, 8, 0)

    @pytest.mark.parametrize("text", ["в 25:00", "at 12:75", "24:00"])
    def test_out_of_range_time_raises(self, text):
        """Clock times outside 00:00-23:59 raise UnresolvableDateError."""
        with pytest.raises(UnresolvableDateError) as exc_info:
            self.resolver.resolve(text, NOW)
        assert exc_info.value.reason is FailureReason.UNRESOLVABLE_DATE

    def test_out_of_range_time_raises_even_with_day_expression(self):
        """A bad clock time fails even when a day expression is present."""
        with pytest.raises(UnresolvableDateError):
            self.resolver.resolve("завтра в 26:10", NOW)


class TestPrecedence:
    def setup_method(self):
        self.resolver = RelativeDateResolver(default_hour=9)

    def test_tomorrow_beats_weekday(self):
        """Tomorrow takes precedence over a weekday name."""
        assert self.resolver.resolve("в понедельник или завтра", NOW) == datetime(2026, 1, 2, 9, 0)

    def test_relative_beats_today(self):
        """An "in N days" offset takes precedence over today."""
        assert self.resolver.resolve("сегодня или через 3 дня", NOW) == datetime(2026, 1, 4, 9, 0)

    def test_today_beats_weekday(self):
        """Today takes precedence over a weekday name."""
        assert self.resolver.resolve("today, not on Monday", NOW) == datetime(2026, 1, 1, 9, 0)


class TestAbsentAndSpans:
    def setup_method(self):
        self.resolver = RelativeDateResolver(default_hour=9)

    @pytest.mark.parametrize(
        "text",
        ["Купить молоко", "priority 8", "Позвонить маме, приоритет 3", "Read chapter 12", ""],
    )
    def test_no_date_expression_returns_none(self, text):
        """Texts without date expressions resolve to None."""
        assert self.resolver.resolve(text, NOW) is None
        assert self.resolver.find(text, NOW) is None

    def test_spans_cover_consumed_expressions(self):
        """find reports the spans of the day and the clock time."""
        text = "Купить молоко завтра в 15:00"
        match = self.resolver.find(text, NOW)
        assert match is not None
        assert [text[s:e] for s, e in match.spans] == ["завтра", "в 15:00"]
        assert match.has_time is True

    def test_losing_expression_is_not_consumed(self):
        """Expressions that lost on precedence are not consumed."""
        text = "завтра, не в пятницу"
        match = self.resolver.find(text, NOW)
        assert [text[s:e] for s, e in match.spans] == ["завтра"]
        assert match.has_time is False

    def test_timezone_of_now_is_preserved(self):
        """The result keeps the timezone of now."""
        tz = ZoneInfo("Europe/Moscow")
        now = datetime(2026, 1, 1, 10, 0, tzinfo=tz)
        result = self.resolver.resolve("завтра в 15:00", now)
        assert result == datetime(2026, 1, 2, 15, 0, tzinfo=tz)
        assert result.tzinfo is tz

    def test_seconds_are_zeroed_when_anchoring(self):
        """Anchoring to the default hour zeroes seconds and microseconds."""
        now = datetime(2026, 1, 1, 10, 17, 42, 123456)
        assert self.resolver.resolve("завтра", now) == datetime(2026, 1, 2, 9, 0)
