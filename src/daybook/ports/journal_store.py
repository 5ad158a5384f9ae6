"""Journal storage interface."""

from datetime import date
from enum import Enum
from typing import Callable, Protocol, TypeVar

from daybook.core.entries import Entry, EntryType, Line
from daybook.core.filters import Filter, FilterEntry
from daybook.core.projection import ProjectedEntry

T = TypeVar("T")


class JournalSlot(Enum):
    """Which of the two journals is active."""

    GLOBAL = "global"
    PROJECT = "project"


class JournalStore(Protocol):
    """Interface for reading and writing the journal document."""

    def load_journal(self) -> str:
        """Read the whole journal. Returns an empty string if it does not exist."""
        ...

    def save_journal(self, content: str) -> None:
        """Write the whole journal."""
        ...

    def switch_journal(self, slot: JournalSlot) -> None:
        """Make another journal the one all later calls read and write."""
        ...

    def load_day_lines(self, target_date: date) -> list[Line]:
        """Parsed lines of one day's section."""
        ...

    def save_day_lines(self, target_date: date, lines: list[Line]) -> None:
        """Replace one day's section with the given lines."""
        ...

    def append_entry(self, target_date: date, entry: Entry) -> int:
        ...

    def mutate_entry(self, target_date: date, line_index: int, operation: Callable[[Entry], T]) -> T | None:
        ...

    def update_entry_content(self, target_date: date, line_index: int, content: str) -> bool:
        ...

    def toggle_entry_complete(self, target_date: date, line_index: int) -> bool:
        ...

    def cycle_entry_type(self, target_date: date, line_index: int) -> EntryType | None:
        ...

    def delete_entry(self, target_date: date, line_index: int) -> bool:
        ...

    def collect_projected_entries(self, target_date: date) -> list[ProjectedEntry]:
        ...

    def collect_filtered_entries(self, filter_: Filter, today: date | None = None) -> list[FilterEntry]:
        ...
