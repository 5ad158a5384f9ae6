"""Ports - interfaces/protocols for external dependencies."""

from .journal_store import JournalSlot, JournalStore
from .calendar_source import CalendarSource

__all__ = [
    "JournalSlot",
    "JournalStore",
    "CalendarSource",
]
