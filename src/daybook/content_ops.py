"""Entry content operations addressed by location.

An entry on screen can live in three places:

- ``DailyLocation``: a line of the current day, already loaded in the session.
- ``ProjectedLocation``: a later/recurring entry shown from another day.
- ``FilterLocation``: a filter result, plus its index in the cached results.

Daily locations edit the session's lines and save the day. The other two
go back to storage for the source day, change the one line, and save.
Locations are only valid until the next write that shifts line indices.
"""

from dataclasses import dataclass
from typing import Callable

from .core.entries import Entry, RawLine
from .core.filters import FilterEntry
from .core.projection import ProjectedEntry
from .session import DaySession


@dataclass(frozen=True)
class DailyLocation:
    line_idx: int


@dataclass(frozen=True)
class ProjectedLocation:
    entry: ProjectedEntry


@dataclass(frozen=True)
class FilterLocation:
    index: int
    entry: FilterEntry


EntryLocation = DailyLocation | ProjectedLocation | FilterLocation


@dataclass
class ContentTarget:
    """A location plus the content it had before an operation, for undo."""

    location: EntryLocation
    original_content: str


def _daily_entry(session: DaySession, line_idx: int) -> Entry | None:
    if not 0 <= line_idx < len(session.lines):
        return None
    line = session.lines[line_idx]
    return line if isinstance(line, Entry) else None


def _after_remote_change(session: DaySession, location: EntryLocation, content: str) -> None:
    """Bring cached views back in line after a write to another day's line."""
    match location:
        case ProjectedLocation():
            session.refresh_projected_entries()
        case FilterLocation(index=index, entry=entry):
            if 0 <= index < len(session.filter_entries):
                session.filter_entries[index].content = content
            if entry.source_date == session.current_date:
                session.reload_current_day()


def get_entry_content(session: DaySession, location: EntryLocation) -> str:
    """Current content at a location; empty if it no longer holds an entry."""
    match location:
        case DailyLocation(line_idx=line_idx):
            entry = _daily_entry(session, line_idx)
        case ProjectedLocation(entry=ref) | FilterLocation(entry=ref):
            lines = session.store.load_day_lines(ref.source_date)
            line = lines[ref.line_index] if 0 <= ref.line_index < len(lines) else RawLine("")
            entry = line if isinstance(line, Entry) else None
        case _:
            raise TypeError(f"Unknown entry location: {location!r}")
    return entry.content if entry else ""


def execute_content_operation(
    session: DaySession,
    location: EntryLocation,
    operation: Callable[[str], str | None],
) -> bool:
    """
    Transform the content at a location.

    ``operation`` gets the current content and returns the new content,
    or None to leave it alone. Returns whether anything changed.
    """
    match location:
        case DailyLocation(line_idx=line_idx):
            entry = _daily_entry(session, line_idx)
            if entry is None:
                return False
            new_content = operation(entry.content)
            if new_content is None:
                return False
            entry.content = new_content
            session.save()
            return True

        case ProjectedLocation(entry=ref) | FilterLocation(entry=ref):

            def apply(entry: Entry) -> str | None:
                new_content = operation(entry.content)
                if new_content is not None:
                    entry.content = new_content
                return new_content

            new_content = session.store.mutate_entry(ref.source_date, ref.line_index, apply)
            if new_content is None:
                return False
            _after_remote_change(session, location, new_content)
            return True

        case _:
            raise TypeError(f"Unknown entry location: {location!r}")


def set_entry_content(session: DaySession, location: EntryLocation, content: str) -> bool:
    """Overwrite the content at a location (used to restore originals)."""
    return execute_content_operation(session, location, lambda _: content)


def execute_content_append(session: DaySession, location: EntryLocation, suffix: str) -> bool:
    """Append text to the content at a location."""
    return execute_content_operation(session, location, lambda content: content + suffix)


def capture_targets(session: DaySession, locations: list[EntryLocation]) -> list[ContentTarget]:
    """Record the current content of each location before changing it."""
    return [ContentTarget(location, get_entry_content(session, location)) for location in locations]


def restore_content(session: DaySession, targets: list[ContentTarget]) -> list[ContentTarget]:
    """
    Put each target's original content back.

    Returns targets holding the content that was just replaced, so the
    same call can redo what this one undid.
    """
    replaced = []
    for target in targets:
        current = get_entry_content(session, target.location)
        set_entry_content(session, target.location, target.original_content)
        replaced.append(ContentTarget(target.location, current))
    return replaced
