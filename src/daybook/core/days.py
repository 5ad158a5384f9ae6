"""Pure day-section logic for the single journal document - no I/O.

A journal is a sequence of day sections. Each section starts with a
header line ``# YYYY/MM/DD`` and runs until the next header or the end
of the document. Every function here takes the whole document text and
returns new text; callers do the reading and writing.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterator

from .entries import Line, parse_line, split_lines

_HEADER_PATTERN = re.compile(r"# ([0-9]{4})/([0-9]{2})/([0-9]{2})")


def day_header(target_date: date) -> str:
    """Header line for a date, e.g. ``# 2026/01/15``."""
    return f"# {target_date:%Y/%m/%d}"


def parse_day_header(line: str) -> date | None:
    """Return the date of a day header line, or None for any other line."""
    match = _HEADER_PATTERN.match(line)
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def _iter_line_spans(text: str) -> Iterator[tuple[int, str]]:
    """Yield (offset, line) for each line, without line terminators."""
    pos = 0
    while pos < len(text):
        end = text.find("\n", pos)
        line_end = len(text) if end == -1 else end
        line = text[pos:line_end]
        yield pos, line[:-1] if line.endswith("\r") else line
        if end == -1:
            return
        pos = end + 1


def _find_header(journal: str, target_date: date) -> int | None:
    """Offset of the header line for a day, matched at the start of a line."""
    for offset, line in _iter_line_spans(journal):
        if parse_day_header(line) == target_date:
            return offset
    return None


def _find_next_day_header(text: str) -> int | None:
    for offset, line in _iter_line_spans(text):
        if parse_day_header(line) is not None:
            return offset
    return None


def _header_line_end(journal: str, start: int) -> int:
    end = journal.find("\n", start)
    return len(journal) if end == -1 else end


def _content_after_header(journal: str, start: int) -> str:
    """Everything after the header line, including any text trailing the date."""
    return journal[_header_line_end(journal, start) + 1:]


def extract_day_content(journal: str, target_date: date) -> str:
    """
    Extract one day's content from the journal.

    Returns the text between the day's header line and the next header,
    with trailing whitespace removed. Empty string if the day has no header.
    """
    start = _find_header(journal, target_date)
    if start is None:
        return ""

    after_header = _content_after_header(journal, start)
    end = _find_next_day_header(after_header)
    if end is not None:
        after_header = after_header[:end]
    return after_header.rstrip()


def update_day_content(journal: str, target_date: date, new_content: str) -> str:
    """
    Replace, insert or remove one day's section and return the new journal.

    Blank content removes the day. A day that does not exist yet is
    inserted before the first later day. Sections are separated by one
    blank line and the document ends with a single newline. Replacing a
    day keeps its existing header line as written.
    """
    content_is_empty = not new_content.strip()
    start = _find_header(journal, target_date)

    if start is not None:
        before, header_line, after = _split_around_day(journal, start)
        if content_is_empty:
            return _remove_day(before, after)
        return _replace_day(before, header_line, new_content, after)

    if content_is_empty:
        return journal
    return _insert_new_day(journal, target_date, day_header(target_date), new_content)


def _split_around_day(journal: str, start: int) -> tuple[str, str, str]:
    before = journal[:start]
    header_line = journal[start:_header_line_end(journal, start)].rstrip()
    after_header = _content_after_header(journal, start)
    end = _find_next_day_header(after_header)
    after = after_header[end:] if end is not None else ""
    return before, header_line, after


def _remove_day(before: str, after: str) -> str:
    result = before.rstrip()
    if result and after:
        result += "\n\n"
    result += after.lstrip()
    if not result:
        return result
    return result.rstrip() + "\n"


def _replace_day(before: str, header: str, content: str, after: str) -> str:
    return f"{before}{header}\n{content.rstrip()}\n\n{after}".rstrip() + "\n"


def _insert_new_day(journal: str, target_date: date, header: str, content: str) -> str:
    new_day = f"{header}\n{content.rstrip()}"
    pos = _find_insertion_point(journal, target_date)

    if pos is None:
        result = journal.rstrip()
        if result:
            result += "\n\n"
        return result + new_day + "\n"

    before = journal[:pos].rstrip()
    after = journal[pos:].lstrip()
    if not before:
        return f"{new_day}\n\n{after}".rstrip() + "\n"
    return f"{before}\n\n{new_day}\n\n{after}".rstrip() + "\n"


def _find_insertion_point(journal: str, target_date: date) -> int | None:
    """Offset of the first header dated strictly after the target date."""
    for offset, line in _iter_line_spans(journal):
        existing = parse_day_header(line)
        if existing is not None and existing > target_date:
            return offset
    return None


@dataclass
class DayLine:
    """A line of the journal together with the day it belongs to."""

    source_date: date
    line_index: int
    line: Line


def iter_day_lines(journal: str) -> Iterator[DayLine]:
    """
    Walk the whole journal once, yielding every line inside a day section.

    ``line_index`` counts lines from the start of each day's content, so it
    addresses the same line as an index into that day's parsed lines.
    Text before the first header belongs to no day and is skipped.
    """
    current_date: date | None = None
    line_index = 0

    for raw in split_lines(journal):
        header_date = parse_day_header(raw)
        if header_date is not None:
            current_date = header_date
            line_index = 0
            continue
        if current_date is None:
            continue
        yield DayLine(current_date, line_index, parse_line(raw))
        line_index += 1

