"""Pure projection logic - entries that show up on a date other than their own.

Two kinds of projection exist:

- Later: a one-shot ``@MM/DD`` (or dated) marker pointing at the target date.
- Recurring: an ``@every-*`` rule that fires on the target date.

Each projected entry keeps ``source_date`` and ``line_index`` so an edit
can be routed back to the exact line it came from.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from .dates import extract_target_date
from .days import iter_day_lines
from .entries import Entry, EntryType
from .recurring import extract_recurring_pattern


class ProjectedKind(Enum):
    LATER = "later"
    RECURRING = "recurring"


@dataclass
class ProjectedEntry:
    """A read-only snapshot of an entry from another day."""

    source_date: date
    line_index: int
    content: str
    entry_type: EntryType
    completed: bool
    kind: ProjectedKind = ProjectedKind.LATER

    @property
    def is_recurring(self) -> bool:
        return self.kind is ProjectedKind.RECURRING

    def to_entry(self) -> Entry:
        return Entry(self.entry_type, self.content, self.completed)

    def source_label(self) -> str:
        """Short source-date label shown next to a projected entry."""
        return f"({self.source_date:%m/%d})"


def _snapshot(source_date: date, line_index: int, entry: Entry, kind: ProjectedKind) -> ProjectedEntry:
    return ProjectedEntry(
        source_date=source_date,
        line_index=line_index,
        content=entry.content,
        entry_type=entry.entry_type,
        completed=entry.is_task and entry.completed,
        kind=kind,
    )


def _classify(source_date: date, entry: Entry, target_date: date) -> ProjectedKind | None:
    """
    Decide whether an entry from source_date projects onto target_date.

    An ``@every-*`` rule makes the entry recurring; it then never counts as
    a later entry, and only fires on days after the one it was written on.
    ``@date`` markers resolve relative to the target date, not to today.
    """
    if source_date == target_date:
        return None

    pattern = extract_recurring_pattern(entry.content)
    if pattern:
        if source_date < target_date and pattern.matches(target_date):
            return ProjectedKind.RECURRING
        return None

    if extract_target_date(entry.content, target_date) == target_date:
        return ProjectedKind.LATER
    return None


def collect_projected_entries(journal: str, target_date: date) -> list[ProjectedEntry]:
    """
    Scan the journal once for everything projected onto target_date.

    Entries that live on the target date itself are skipped; they are
    ordinary entries there. Later entries come first, then recurring ones,
    each ordered by source date and then document order.
    """
    later: list[ProjectedEntry] = []
    recurring: list[ProjectedEntry] = []

    for day_line in iter_day_lines(journal):
        if not isinstance(day_line.line, Entry):
            continue
        kind = _classify(day_line.source_date, day_line.line, target_date)
        if kind is None:
            continue
        snapshot = _snapshot(day_line.source_date, day_line.line_index, day_line.line, kind)
        (recurring if kind is ProjectedKind.RECURRING else later).append(snapshot)

    later.sort(key=lambda e: e.source_date)
    recurring.sort(key=lambda e: e.source_date)
    return later + recurring


def collect_later_entries(journal: str, target_date: date) -> list[ProjectedEntry]:
    """One-shot ``@date`` entries from other days that point at target_date."""
    return [e for e in collect_projected_entries(journal, target_date) if not e.is_recurring]


def collect_recurring_entries(journal: str, target_date: date) -> list[ProjectedEntry]:
    """Entries from earlier days whose ``@every-*`` rule fires on target_date."""
    return [e for e in collect_projected_entries(journal, target_date) if e.is_recurring]
