"""The day being worked on: its loaded lines plus cached projected and filter views."""

import logging
from datetime import date

from .core.entries import Entry, Line
from .core.filters import FilterEntry, expand_saved_filters, parse_filter_query
from .core.projection import ProjectedEntry
from .ports.journal_store import JournalSlot, JournalStore

logger = logging.getLogger(__name__)


class DaySession:
    """
    In-memory state for one viewed date.

    ``lines`` is the parsed section of ``current_date`` as last loaded;
    daily locations index into it directly. ``projected_entries`` and
    ``filter_entries`` are snapshots that must be refreshed after writes
    that go around them.
    """

    def __init__(self, store: JournalStore, current_date: date | None = None):
        self.store = store
        self.current_date = current_date or date.today()
        self.lines: list[Line] = []
        self.projected_entries: list[ProjectedEntry] = []
        self.filter_entries: list[FilterEntry] = []
        self.reload_current_day()

    @property
    def entry_indices(self) -> list[int]:
        """Indices of the entry lines in ``lines``."""
        return [i for i, line in enumerate(self.lines) if isinstance(line, Entry)]

    def save(self) -> None:
        """Write the in-memory lines back to the current day's section."""
        self.store.save_day_lines(self.current_date, self.lines)

    def reload_current_day(self) -> None:
        self.lines = self.store.load_day_lines(self.current_date)
        self.refresh_projected_entries()

    def refresh_projected_entries(self) -> None:
        self.projected_entries = self.store.collect_projected_entries(self.current_date)

    def goto_day(self, target_date: date) -> None:
        self.current_date = target_date
        self.reload_current_day()

    def switch_journal(self, slot: JournalSlot) -> None:
        """Make another journal active and reload everything from it."""
        self.store.switch_journal(slot)
        self.filter_entries = []
        self.reload_current_day()

    def run_filter(
        self,
        query: str,
        saved_filters: dict[str, str] | None = None,
        today: date | None = None,
    ) -> tuple[list[FilterEntry], list[str]]:
        """
        Run a filter query and cache its results.

        Returns the results plus problems with the query: unknown saved
        filters and invalid tokens. Any problem means no results.
        """
        expanded, unknown = expand_saved_filters(query, saved_filters or {})
        filter_ = parse_filter_query(expanded, today)
        problems = [f"Unknown filter: {name}" for name in unknown]
        problems += [f"Invalid token: {token}" for token in filter_.invalid_tokens]
        if problems:
            logger.debug(f"Filter query {query!r} rejected: {problems}")
            self.filter_entries = []
            return [], problems

        self.filter_entries = self.store.collect_filtered_entries(filter_, today)
        return self.filter_entries, []
