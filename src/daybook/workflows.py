"""Shared workflow layer between the CLI and the journal.

Each function takes loaded config plus a store or session, does one
user-level action, and returns plain data for the caller to render.
"""

import logging
from datetime import date
from pathlib import Path

from .adapters.file_journal import FileJournalStore, JournalContext, detect_project_journal
from .adapters.ics_calendar import IcsCalendarAdapter
from .config import Config
from .content_ops import DailyLocation, EntryLocation, FilterLocation, ProjectedLocation, execute_content_operation
from .core.dates import defer_date, normalize_natural_dates, remove_date
from .core.entries import Entry, EntryType
from .core.filters import FilterEntry
from .core.tags import expand_favorite_tags, remove_all_trailing_tags, remove_last_trailing_tag
from .errors import DaybookError, ProjectJournalError
from .ports.calendar_source import CalendarSource
from .ports.journal_store import JournalSlot, JournalStore
from .session import DaySession

logger = logging.getLogger(__name__)


def get_store(config: Config, project: bool = False, start: Path | None = None) -> FileJournalStore:
    """Build a store over the global journal, or the project journal if asked."""
    context = JournalContext(config.get_global_journal_path(), detect_project_journal(start))
    if project:
        if context.project_path is None:
            raise ProjectJournalError("No project journal found. Run 'daybook project init' first.")
        context.set_active_slot(JournalSlot.PROJECT)
    return FileJournalStore(context)


def open_session(store: JournalStore, target_date: date | None = None) -> DaySession:
    return DaySession(store, target_date)


def prepare_content(text: str, config: Config, today: date) -> str:
    """Resolve natural dates and favorite tag shortcuts in typed text."""
    return expand_favorite_tags(normalize_natural_dates(text, today), config.favorite_tags)


def add_entry(
    store: JournalStore,
    target_date: date,
    text: str,
    entry_type: EntryType,
    config: Config,
    today: date | None = None,
) -> Entry:
    """Append a new entry to a day and return it."""
    today = today or date.today()
    entry = Entry(entry_type, prepare_content(text, config, today))
    store.append_entry(target_date, entry)
    logger.debug(f"Added {entry_type.value} to {target_date}: {entry.content!r}")
    return entry


def resolve_location(session: DaySession, ref: str) -> EntryLocation:
    """
    Turn a user-facing entry number into a location.

    ``3`` is the third entry of the day; ``p2`` is the second projected
    entry shown under it. Numbers start at 1.
    """
    projected = ref[:1].lower() == "p"
    digits = ref[1:] if projected else ref
    if not digits.isdigit() or int(digits) < 1:
        raise DaybookError(f"Invalid entry number: {ref}")

    number = int(digits) - 1
    if projected:
        if number >= len(session.projected_entries):
            raise DaybookError(f"No projected entry {ref}")
        return ProjectedLocation(session.projected_entries[number])

    indices = session.entry_indices
    if number >= len(indices):
        raise DaybookError(f"No entry {ref} on {session.current_date}")
    return DailyLocation(indices[number])


def filter_location(session: DaySession, ref: str) -> FilterLocation:
    """Location of a numbered result from the last filter run."""
    if not ref.isdigit() or not 1 <= int(ref) <= len(session.filter_entries):
        raise DaybookError(f"No filter result {ref}")
    index = int(ref) - 1
    return FilterLocation(index, session.filter_entries[index])


def defer_entry(session: DaySession, location: EntryLocation, today: date | None = None) -> bool:
    """Push an entry's @date one day later."""
    today = today or date.today()
    return execute_content_operation(session, location, lambda content: defer_date(content, today))


def undate_entry(session: DaySession, location: EntryLocation) -> bool:
    """Strip an entry's @date marker."""
    return execute_content_operation(session, location, remove_date)


def untag_entry(session: DaySession, location: EntryLocation, all_tags: bool = False) -> bool:
    """Strip the last trailing tag, or every trailing tag."""
    operation = remove_all_trailing_tags if all_tags else remove_last_trailing_tag
    return execute_content_operation(session, location, operation)


def run_filter(
    session: DaySession,
    query: str | None,
    config: Config,
    today: date | None = None,
) -> tuple[list[FilterEntry], list[str]]:
    """Run a query (or the configured default) with saved filters expanded."""
    query = query if query and query.strip() else config.default_filter
    return session.run_filter(query, config.filters, today)


def fetch_calendars(config: Config, source: CalendarSource | None = None) -> dict[str, str]:
    """Fetch every configured calendar. Calendars that fail are left out."""
    source = source or IcsCalendarAdapter()
    results = {}
    for label, url in config.calendars.items():
        text = source.fetch(url)
        if text is None:
            logger.warning(f"Skipping calendar {label}: fetch failed")
            continue
        results[label] = text
    return results
