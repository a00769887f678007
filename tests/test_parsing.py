"""Tests for race text parsing helpers."""

from datetime import date, datetime

import pytest

from racelog.parsing import (
    format_duration,
    format_pace,
    parse_date,
    parse_duration,
    parse_pace,
    parse_placement,
)


class TestParseDuration:
    """Tests for parse_duration."""

    def test_hours_minutes_seconds(self):
        assert parse_duration("1:02:30") == 62.5

    def test_minutes_seconds(self):
        assert parse_duration("45:30") == 45.5

    def test_rounds_to_two_decimals(self):
        # 20 seconds = 0.333... minutes
        assert parse_duration("10:20") == 10.33

    @pytest.mark.parametrize("text", ["", "--", None, "  "])
    def test_unknown_markers(self, text):
        assert parse_duration(text) == 0

    @pytest.mark.parametrize("text", ["abc", "1:xx", "1:2:3:4", "90", "DNF"])
    def test_malformed_is_zero(self, text):
        assert parse_duration(text) == 0

    def test_negative_is_zero(self):
        assert parse_duration("-5:00") == 0

    def test_overflow_is_zero(self):
        assert parse_duration("1e308:00:00") == 0


class TestParsePace:
    """Tests for parse_pace."""

    def test_minutes_seconds(self):
        assert parse_pace("8:15") == 495

    def test_unknown(self):
        assert parse_pace("--") == 0
        assert parse_pace("") == 0
        assert parse_pace(None) == 0

    def test_three_parts_is_zero(self):
        assert parse_pace("1:08:15") == 0

    def test_non_numeric_is_zero(self):
        assert parse_pace("fast") == 0

    def test_overflow_is_zero(self):
        assert parse_pace("1e308:00") == 0
        assert parse_pace("inf:00") == 0


class TestParseDate:
    """Tests for parse_date."""

    def test_long_month_format(self):
        assert parse_date("March 20, 2025") == datetime(2025, 3, 20)

    def test_short_month_with_period(self):
        assert parse_date("Mar. 5, 2021") == datetime(2021, 3, 5)

    def test_iso_and_us_formats(self):
        assert parse_date("2024-06-01") == datetime(2024, 6, 1)
        assert parse_date("06/01/2024") == datetime(2024, 6, 1)

    def test_date_object_passes_through(self):
        assert parse_date(date(2020, 1, 2)) == datetime(2020, 1, 2)

    def test_iso_datetime(self):
        assert parse_date("2024-03-05T08:00:00") == datetime(2024, 3, 5, 8, 0)
        assert parse_date("2024-03-05 08:00:00") == datetime(2024, 3, 5, 8, 0)

    def test_iso_datetime_with_offset_is_naive(self):
        parsed = parse_date("2024-03-05T08:00:00+00:00")
        assert parsed == datetime(2024, 3, 5, 8, 0)
        assert parsed.tzinfo is None

    def test_sept_spelling(self):
        assert parse_date("Sept 5, 2024") == datetime(2024, 9, 5)
        assert parse_date("Sept. 5, 2024") == datetime(2024, 9, 5)

    @pytest.mark.parametrize("value", ["", "sometime in spring", None, 12345])
    def test_invalid_is_none(self, value):
        assert parse_date(value) is None


class TestParsePlacement:
    """Tests for parse_placement."""

    def test_of_form(self):
        assert parse_placement("3 of 120") == (3, 120)

    def test_slash_form(self):
        assert parse_placement("14/250") == (14, 250)

    def test_rank_only(self):
        assert parse_placement("7") == (7, None)

    @pytest.mark.parametrize("text", ["", None, "--", "first"])
    def test_unparseable(self, text):
        assert parse_placement(text) is None


class TestFormatting:
    """Tests for duration and pace formatting."""

    def test_format_duration_over_an_hour(self):
        assert format_duration(62.5) == "1:02:30"

    def test_format_duration_under_an_hour(self):
        assert format_duration(45.5) == "45:30"

    def test_format_pace(self):
        assert format_pace(495) == "8:15"

    def test_format_pace_unknown(self):
        assert format_pace(0) == "--"
