"""Tests for date marker resolution."""

from datetime import date

import pytest

from daybook.core.dates import (
    defer_date,
    extract_target_date,
    extract_target_date_prefer_past,
    next_weekday_from,
    normalize_natural_dates,
    parse_date_prefer_past,
    parse_later_date,
    parse_natural_date,
    prev_weekday_from,
    remove_date,
)


@pytest.fixture
def today():
    # A Monday
    return date(2026, 1, 5)


class TestParseLaterDate:
    def test_future_month_day_stays_this_year(self, today):
        assert parse_later_date("12/25", today) == date(2026, 12, 25)

    def test_passed_month_day_rolls_to_next_year(self, today):
        assert parse_later_date("01/01", today) == date(2027, 1, 1)

    def test_today_is_not_passed(self, today):
        assert parse_later_date("1/5", today) == date(2026, 1, 5)

    def test_year_first(self, today):
        assert parse_later_date("2025/03/04", today) == date(2025, 3, 4)

    def test_four_digit_year_last(self, today):
        assert parse_later_date("03/04/2025", today) == date(2025, 3, 4)

    def test_two_digit_year(self, today):
        assert parse_later_date("03/04/25", today) == date(2025, 3, 4)

    def test_explicit_year_never_rolls(self, today):
        assert parse_later_date("01/01/2026", today) == date(2026, 1, 1)

    @pytest.mark.parametrize("value", ["13/01", "02/30", "abc", "1/2/3/4", "", "1/"])
    def test_invalid(self, value, today):
        assert parse_later_date(value, today) is None


class TestParseDatePreferPast:
    def test_future_month_day_goes_to_last_year(self, today):
        assert parse_date_prefer_past("12/30", today) == date(2025, 12, 30)

    def test_past_month_day_stays_this_year(self, today):
        assert parse_date_prefer_past("01/02", today) == date(2026, 1, 2)

    def test_today_stays(self, today):
        assert parse_date_prefer_past("01/05", today) == date(2026, 1, 5)

    def test_explicit_year(self, today):
        assert parse_date_prefer_past("2026/12/30", today) == date(2026, 12, 30)


class TestParseNaturalDate:
    def test_tomorrow_and_yesterday(self, today):
        assert parse_natural_date("tomorrow", today) == date(2026, 1, 6)
        assert parse_natural_date("Yesterday", today) == date(2026, 1, 4)

    def test_relative_days(self, today):
        assert parse_natural_date("3d", today) == date(2026, 1, 8)
        assert parse_natural_date("-3d", today) == date(2026, 1, 2)

    def test_zero_days_rejected(self, today):
        assert parse_natural_date("0d", today) is None
        assert parse_natural_date("-0d", today) is None

    def test_next_weekday(self, today):
        assert parse_natural_date("next-wed", today) == date(2026, 1, 7)
        assert parse_natural_date("next-Friday", today) == date(2026, 1, 9)

    def test_next_same_weekday_is_a_week_out(self, today):
        assert parse_natural_date("next-mon", today) == date(2026, 1, 12)

    def test_last_weekday(self, today):
        assert parse_natural_date("last-fri", today) == date(2026, 1, 2)
        assert parse_natural_date("last-monday", today) == date(2025, 12, 29)

    def test_unknown_weekday_falls_through(self, today):
        assert parse_natural_date("next-someday", today) is None

    def test_falls_back_to_absolute(self, today):
        assert parse_natural_date("01/20", today) == date(2026, 1, 20)
        assert parse_natural_date("2026/02/01", today) == date(2026, 2, 1)

    def test_weekday_helpers(self, today):
        assert next_weekday_from(today, 0) == date(2026, 1, 12)
        assert prev_weekday_from(today, 0) == date(2025, 12, 29)


class TestNormalizeNaturalDates:
    def test_tomorrow(self, today):
        assert normalize_natural_dates("Call @tomorrow", today) == "Call @01/06"

    def test_every_occurrence(self, today):
        assert normalize_natural_dates("@2d then @next-fri", today) == "@01/07 then @01/09"

    def test_unknown_phrase_untouched(self, today):
        assert normalize_natural_dates("ping @someone", today) == "ping @someone"

    def test_absolute_markers_untouched(self, today):
        assert normalize_natural_dates("due @01/20", today) == "due @01/20"

    def test_requires_word_boundary(self, today):
        assert normalize_natural_dates("@3days", today) == "@3days"

    def test_recurring_marker_untouched(self, today):
        assert normalize_natural_dates("gym @every-mon", today) == "gym @every-mon"


class TestExtractTargetDate:
    def test_first_marker(self, today):
        assert extract_target_date("pay @01/20 or @02/01", today) == date(2026, 1, 20)

    def test_no_marker(self, today):
        assert extract_target_date("no date", today) is None

    def test_unparseable_marker(self, today):
        assert extract_target_date("bad @13/45", today) is None

    def test_prefer_past(self, today):
        assert extract_target_date_prefer_past("rent @12/30", today) == date(2025, 12, 30)


class TestDeferDate:
    def test_bare_marker(self, today):
        assert defer_date("pay @01/20 now", today) == "pay @01/21 now"

    def test_month_rollover(self, today):
        assert defer_date("pay @01/31", today) == "pay @02/01"

    def test_year_rollover_keeps_year_form(self, today):
        assert defer_date("pay @2026/12/31", today) == "pay @2027/01/01"

    def test_explicit_year_rewritten_year_first(self, today):
        assert defer_date("pay @03/04/2026", today) == "pay @2026/03/05"

    def test_no_marker(self, today):
        assert defer_date("nothing", today) is None


class TestRemoveDate:
    def test_removes_marker_and_space(self):
        assert remove_date("pay @01/20 now") == "pay now"

    def test_marker_at_start(self):
        assert remove_date("@01/20 pay") == " pay"

    def test_no_marker(self):
        assert remove_date("nothing") is None
