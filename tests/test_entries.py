"""Tests for the entry model."""

import pytest

from daybook.core.entries import (
    Entry,
    EntryType,
    RawLine,
    parse_line,
    parse_lines,
    serialize_line,
    serialize_lines,
)


class TestParseLine:
    def test_open_task(self):
        assert parse_line("- [ ] Buy milk") == Entry(EntryType.TASK, "Buy milk", False)

    def test_done_task(self):
        assert parse_line("- [x] Buy milk") == Entry(EntryType.TASK, "Buy milk", True)

    def test_event(self):
        assert parse_line("* Standup 10:00") == Entry(EntryType.EVENT, "Standup 10:00")

    def test_note(self):
        assert parse_line("- remember this") == Entry(EntryType.NOTE, "remember this")

    def test_task_prefix_wins_over_note(self):
        line = parse_line("- [ ] - nested dash")
        assert line.entry_type is EntryType.TASK
        assert line.content == "- nested dash"

    def test_leading_whitespace_ignored(self):
        assert parse_line("   - [x] indented") == Entry(EntryType.TASK, "indented", True)

    def test_unrecognized_is_raw_with_original_text(self):
        assert parse_line("  plain text") == RawLine("  plain text")

    def test_blank_line_is_raw(self):
        assert parse_line("") == RawLine("")

    def test_uppercase_x_is_not_done(self):
        # "- [X] " is not a recognized prefix, so it parses as a note
        line = parse_line("- [X] shouting")
        assert line == Entry(EntryType.NOTE, "[X] shouting")


class TestSerializeLine:
    def test_entries(self):
        assert serialize_line(Entry(EntryType.TASK, "a")) == "- [ ] a"
        assert serialize_line(Entry(EntryType.TASK, "a", True)) == "- [x] a"
        assert serialize_line(Entry(EntryType.NOTE, "a")) == "- a"
        assert serialize_line(Entry(EntryType.EVENT, "a")) == "* a"

    def test_raw_unchanged(self):
        assert serialize_line(RawLine("  ## heading ")) == "  ## heading "


class TestRoundTrip:
    @pytest.mark.parametrize(
        "text",
        [
            "- [ ] one\n- [x] two\n* three\n- four",
            "free text\n\n- [ ] task after blank",
            "",
            "- a\n\n\n- b",
        ],
    )
    def test_serialize_parse_identity(self, text):
        assert serialize_lines(parse_lines(text)) == text

    def test_trailing_newline_not_kept(self):
        assert serialize_lines(parse_lines("- a\n")) == "- a"

    def test_crlf_stripped(self):
        assert parse_lines("- a\r\n- b") == [Entry(EntryType.NOTE, "a"), Entry(EntryType.NOTE, "b")]


class TestEntry:
    def test_toggle_task(self):
        entry = Entry.new_task("x")
        entry.toggle_complete()
        assert entry.completed
        entry.toggle_complete()
        assert not entry.completed

    def test_toggle_note_is_noop(self):
        entry = Entry(EntryType.NOTE, "x")
        entry.toggle_complete()
        assert not entry.completed

    def test_cycle_order(self):
        entry = Entry.new_task("x")
        entry.cycle_type()
        assert entry.entry_type is EntryType.NOTE
        entry.cycle_type()
        assert entry.entry_type is EntryType.EVENT
        entry.cycle_type()
        assert entry.entry_type is EntryType.TASK

    def test_cycle_clears_completion(self):
        entry = Entry(EntryType.TASK, "x", True)
        entry.cycle_type()
        entry.cycle_type()
        entry.cycle_type()
        assert entry.is_task
        assert not entry.completed
