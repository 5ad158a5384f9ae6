"""Adapters - I/O implementations of ports."""

from daybook.ports.journal_store import JournalSlot

from .file_journal import FileJournalStore, JournalContext
from .ics_calendar import IcsCalendarAdapter

__all__ = [
    "FileJournalStore",
    "JournalContext",
    "JournalSlot",
    "IcsCalendarAdapter",
]
