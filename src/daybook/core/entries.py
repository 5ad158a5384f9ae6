"""Pure entry model - journal lines and their text prefixes, no I/O."""

from dataclasses import dataclass
from enum import Enum


class EntryType(Enum):
    """Kind of a journal entry."""

    TASK = "task"
    NOTE = "note"
    EVENT = "event"

    def cycle(self) -> "EntryType":
        """Next type in the Task -> Note -> Event -> Task rotation."""
        order = [EntryType.TASK, EntryType.NOTE, EntryType.EVENT]
        return order[(order.index(self) + 1) % len(order)]


OPEN_TASK_PREFIX = "- [ ] "
DONE_TASK_PREFIX = "- [x] "
NOTE_PREFIX = "- "
EVENT_PREFIX = "* "


@dataclass
class Entry:
    """A typed journal line: task, note or event."""

    entry_type: EntryType
    content: str
    completed: bool = False

    @classmethod
    def new_task(cls, content: str) -> "Entry":
        return cls(EntryType.TASK, content)

    @property
    def is_task(self) -> bool:
        return self.entry_type is EntryType.TASK

    @property
    def prefix(self) -> str:
        match self.entry_type:
            case EntryType.TASK:
                return DONE_TASK_PREFIX if self.completed else OPEN_TASK_PREFIX
            case EntryType.NOTE:
                return NOTE_PREFIX
            case EntryType.EVENT:
                return EVENT_PREFIX

    def toggle_complete(self) -> None:
        """Flip completion. Only tasks have a completion state."""
        if self.is_task:
            self.completed = not self.completed

    def cycle_type(self) -> None:
        """Advance to the next entry type. A task entered by cycling starts open."""
        self.entry_type = self.entry_type.cycle()
        self.completed = False


@dataclass
class RawLine:
    """A line kept verbatim: blank lines, headings, free text."""

    text: str


Line = Entry | RawLine


# Order matters: "- " is a prefix of both task prefixes.
_PREFIXES = (
    (OPEN_TASK_PREFIX, EntryType.TASK, False),
    (DONE_TASK_PREFIX, EntryType.TASK, True),
    (EVENT_PREFIX, EntryType.EVENT, False),
    (NOTE_PREFIX, EntryType.NOTE, False),
)


def parse_line(line: str) -> Line:
    """
    Parse one line of a day's content.

    Leading whitespace is ignored when matching prefixes. A line that
    matches none of them is kept as a RawLine holding the original text.
    """
    trimmed = line.lstrip()
    for prefix, entry_type, completed in _PREFIXES:
        if trimmed.startswith(prefix):
            return Entry(entry_type, trimmed[len(prefix):], completed)
    return RawLine(line)


def serialize_line(line: Line) -> str:
    if isinstance(line, Entry):
        return f"{line.prefix}{line.content}"
    return line.text


def split_lines(text: str) -> list[str]:
    """
    Split on newlines the way a line reader does.

    A trailing newline does not produce an empty final line, and a
    carriage return before a newline is dropped.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_lines(content: str) -> list[Line]:
    return [parse_line(line) for line in split_lines(content)]


def serialize_lines(lines: list[Line]) -> str:
    """Join serialized lines with newlines. No trailing newline is added."""
    return "\n".join(serialize_line(line) for line in lines)
