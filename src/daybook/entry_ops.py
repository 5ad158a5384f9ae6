"""Toggle, cycle, edit and delete routed by entry location.

Recurring entries seen through a projection are write-protected: their
source line is the rule itself. Toggling one records a completed copy on
the viewed day instead; editing, cycling or deleting is refused.
"""

import logging

from .content_ops import DailyLocation, EntryLocation, FilterLocation, ProjectedLocation, set_entry_content
from .core.entries import Entry, EntryType
from .core.recurring import strip_recurring_marker
from .errors import RecurringEntryError
from .session import DaySession

logger = logging.getLogger(__name__)


def is_recurring_location(location: EntryLocation) -> bool:
    return isinstance(location, ProjectedLocation) and location.entry.is_recurring


def _guard_recurring(location: EntryLocation, action: str) -> None:
    if is_recurring_location(location):
        raise RecurringEntryError(action)


def materialize_recurring(session: DaySession, location: ProjectedLocation) -> int:
    """Add a completed copy of a recurring entry to the viewed day. Returns its index."""
    content = strip_recurring_marker(location.entry.content)
    session.lines.append(Entry(EntryType.TASK, content, completed=True))
    session.save()
    session.refresh_projected_entries()
    logger.debug(f"Materialized recurring entry {content!r} on {session.current_date}")
    return len(session.lines) - 1


def toggle_at(session: DaySession, location: EntryLocation) -> None:
    """Toggle task completion at a location."""
    match location:
        case DailyLocation(line_idx=line_idx):
            if 0 <= line_idx < len(session.lines) and isinstance(session.lines[line_idx], Entry):
                session.lines[line_idx].toggle_complete()
                session.save()
        case ProjectedLocation(entry=ref):
            if ref.is_recurring and ref.source_date != session.current_date:
                materialize_recurring(session, location)
                return
            session.store.toggle_entry_complete(ref.source_date, ref.line_index)
            session.refresh_projected_entries()
        case FilterLocation(index=index, entry=ref):
            toggled = session.store.toggle_entry_complete(ref.source_date, ref.line_index)
            if toggled and 0 <= index < len(session.filter_entries):
                cached = session.filter_entries[index]
                cached.completed = not cached.completed
            if ref.source_date == session.current_date:
                session.reload_current_day()


def cycle_at(session: DaySession, location: EntryLocation) -> EntryType | None:
    """Cycle the entry type at a location. Returns the new type."""
    _guard_recurring(location, "Cycle")
    match location:
        case DailyLocation(line_idx=line_idx):
            if not (0 <= line_idx < len(session.lines) and isinstance(session.lines[line_idx], Entry)):
                return None
            entry = session.lines[line_idx]
            entry.cycle_type()
            session.save()
            return entry.entry_type
        case ProjectedLocation(entry=ref):
            new_type = session.store.cycle_entry_type(ref.source_date, ref.line_index)
            session.refresh_projected_entries()
            return new_type
        case FilterLocation(index=index, entry=ref):
            new_type = session.store.cycle_entry_type(ref.source_date, ref.line_index)
            if new_type is not None and 0 <= index < len(session.filter_entries):
                session.filter_entries[index].entry_type = new_type
                session.filter_entries[index].completed = False
            if ref.source_date == session.current_date:
                session.reload_current_day()
            return new_type
    return None


def edit_at(session: DaySession, location: EntryLocation, content: str) -> bool:
    """Replace the content at a location."""
    _guard_recurring(location, "Edit")
    return set_entry_content(session, location, content)


def delete_at(session: DaySession, location: EntryLocation) -> bool:
    """
    Delete the line at a location.

    Locations on the same day that point below the deleted line are stale
    afterwards; cached filter results are shifted to match.
    """
    _guard_recurring(location, "Delete")
    match location:
        case DailyLocation(line_idx=line_idx):
            if not 0 <= line_idx < len(session.lines):
                return False
            del session.lines[line_idx]
            session.save()
            session.refresh_projected_entries()
            return True
        case ProjectedLocation(entry=ref):
            deleted = session.store.delete_entry(ref.source_date, ref.line_index)
            session.refresh_projected_entries()
            return deleted
        case FilterLocation(index=index, entry=ref):
            deleted = session.store.delete_entry(ref.source_date, ref.line_index)
            if deleted:
                _drop_filter_result(session, index, ref.source_date, ref.line_index)
                if ref.source_date == session.current_date:
                    session.reload_current_day()
            return deleted
    return False


def _drop_filter_result(session: DaySession, index: int, source_date, line_index: int) -> None:
    if 0 <= index < len(session.filter_entries):
        del session.filter_entries[index]
    for cached in session.filter_entries:
        if cached.source_date == source_date and cached.line_index > line_index:
            cached.line_index -= 1
