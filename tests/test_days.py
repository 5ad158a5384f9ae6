"""Tests for day-section extraction and update."""

from datetime import date

import pytest

from daybook.core.days import (
    day_header,
    extract_day_content,
    iter_day_lines,
    parse_day_header,
    update_day_content,
)
from daybook.core.entries import Entry, EntryType, RawLine, parse_lines


@pytest.fixture
def journal():
    return "# 2026/01/10\n- [ ] a\n\n# 2026/01/20\n- [ ] c\n"


class TestHeaders:
    def test_day_header_format(self):
        assert day_header(date(2026, 1, 5)) == "# 2026/01/05"

    def test_parse_day_header(self):
        assert parse_day_header("# 2026/01/05") == date(2026, 1, 5)

    def test_parse_rejects_invalid_date(self):
        assert parse_day_header("# 2026/02/30") is None

    def test_parse_rejects_other_lines(self):
        assert parse_day_header("## 2026/01/05") is None
        assert parse_day_header("- [ ] # 2026/01/05") is None


class TestExtractDayContent:
    def test_extracts_content_up_to_next_header(self, journal):
        assert extract_day_content(journal, date(2026, 1, 10)) == "- [ ] a"

    def test_last_day(self, journal):
        assert extract_day_content(journal, date(2026, 1, 20)) == "- [ ] c"

    def test_missing_day(self, journal):
        assert extract_day_content(journal, date(2026, 1, 15)) == ""

    def test_empty_journal(self):
        assert extract_day_content("", date(2026, 1, 15)) == ""

    def test_day_directly_followed_by_header_is_empty(self):
        journal = "# 2026/01/10\n# 2026/01/11\n- b\n"
        assert extract_day_content(journal, date(2026, 1, 10)) == ""
        assert extract_day_content(journal, date(2026, 1, 11)) == "- b"

    def test_header_text_inside_entry_is_not_a_header(self):
        journal = "# 2026/01/10\n- see # 2026/01/15 notes\n"
        assert extract_day_content(journal, date(2026, 1, 15)) == ""
        assert extract_day_content(journal, date(2026, 1, 10)) == "- see # 2026/01/15 notes"


class TestUpdateDayContentInsert:
    def test_inserts_between_days(self, journal):
        result = update_day_content(journal, date(2026, 1, 15), "- [ ] b")
        assert result == (
            "# 2026/01/10\n- [ ] a\n\n"
            "# 2026/01/15\n- [ ] b\n\n"
            "# 2026/01/20\n- [ ] c\n"
        )

    def test_inserts_before_earliest(self, journal):
        result = update_day_content(journal, date(2026, 1, 5), "- [ ] z")
        assert result == "# 2026/01/05\n- [ ] z\n\n" + journal

    def test_appends_after_latest(self, journal):
        result = update_day_content(journal, date(2026, 1, 25), "- [ ] d")
        assert result == journal + "\n# 2026/01/25\n- [ ] d\n"

    def test_inserts_into_empty_journal(self):
        assert update_day_content("", date(2026, 1, 15), "- x") == "# 2026/01/15\n- x\n"

    def test_trailing_whitespace_of_content_trimmed(self):
        assert update_day_content("", date(2026, 1, 15), "- x\n\n  ") == "# 2026/01/15\n- x\n"


class TestUpdateDayContentReplace:
    def test_replaces_in_place(self, journal):
        result = update_day_content(journal, date(2026, 1, 10), "- [x] a\n- b\n\n  ")
        assert result == "# 2026/01/10\n- [x] a\n- b\n\n# 2026/01/20\n- [ ] c\n"

    def test_replaces_last_day(self, journal):
        result = update_day_content(journal, date(2026, 1, 20), "- [ ] new")
        assert result == "# 2026/01/10\n- [ ] a\n\n# 2026/01/20\n- [ ] new\n"

    def test_other_days_untouched(self):
        journal = "# 2026/01/10\n- a\n  indented raw\n\n# 2026/01/15\n- b\n\n# 2026/01/20\n- c\n"
        result = update_day_content(journal, date(2026, 1, 15), "- changed")
        assert extract_day_content(result, date(2026, 1, 10)) == "- a\n  indented raw"
        assert extract_day_content(result, date(2026, 1, 20)) == "- c"
        assert result.startswith("# 2026/01/10\n- a\n  indented raw\n\n# 2026/01/15\n")


class TestUpdateDayContentRemove:
    def test_removes_first_day(self, journal):
        assert update_day_content(journal, date(2026, 1, 10), "") == "# 2026/01/20\n- [ ] c\n"

    def test_removes_last_day(self, journal):
        assert update_day_content(journal, date(2026, 1, 20), "  \n") == "# 2026/01/10\n- [ ] a\n"

    def test_removes_middle_day(self):
        journal = "# 2026/01/10\n- a\n\n# 2026/01/15\n- b\n\n# 2026/01/20\n- c\n"
        result = update_day_content(journal, date(2026, 1, 15), "")
        assert result == "# 2026/01/10\n- a\n\n# 2026/01/20\n- c\n"

    def test_removes_only_day(self):
        assert update_day_content("# 2026/01/10\n- a\n", date(2026, 1, 10), "") == ""

    def test_blank_content_for_missing_day_is_noop(self, journal):
        assert update_day_content(journal, date(2026, 1, 15), "") == journal


class TestIterDayLines:
    def test_tracks_day_and_index(self):
        journal = "preamble\n# 2026/01/10\n- [ ] a\nraw\n# 2026/01/11\n* e\n"
        lines = [(d.source_date, d.line_index, d.line) for d in iter_day_lines(journal)]
        assert lines == [
            (date(2026, 1, 10), 0, Entry(EntryType.TASK, "a")),
            (date(2026, 1, 10), 1, RawLine("raw")),
            (date(2026, 1, 11), 0, Entry(EntryType.EVENT, "e")),
        ]

    def test_index_matches_parsed_day(self, journal):
        indexed = [d for d in iter_day_lines(journal) if d.source_date == date(2026, 1, 20)]
        assert indexed[0].line_index == 0
        assert indexed[0].line == Entry(EntryType.TASK, "c")


class TestHeaderWithTrailingText:
    @pytest.fixture
    def journal(self):
        return "# 2026/01/10 Saturday\n- [ ] Pay rent @01/15\nraw\n\n# 2026/01/11\n- b\n"

    def test_trailing_text_is_not_content(self, journal):
        assert extract_day_content(journal, date(2026, 1, 10)) == "- [ ] Pay rent @01/15\nraw"

    def test_scan_indices_match_parsed_day(self, journal):
        day = date(2026, 1, 10)
        parsed = parse_lines(extract_day_content(journal, day))
        scanned = [d for d in iter_day_lines(journal) if d.source_date == day]
        assert [parsed[d.line_index] for d in scanned] == [d.line for d in scanned]

    def test_replace_keeps_header_line(self, journal):
        result = update_day_content(journal, date(2026, 1, 10), "- [x] Pay rent @01/15")
        assert result == "# 2026/01/10 Saturday\n- [x] Pay rent @01/15\n\n# 2026/01/11\n- b\n"

    def test_remove_drops_whole_header_line(self, journal):
        assert update_day_content(journal, date(2026, 1, 10), "") == "# 2026/01/11\n- b\n"
