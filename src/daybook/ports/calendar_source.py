"""Calendar source interface."""

from typing import Protocol


class CalendarSource(Protocol):
    """Interface for fetching calendar data as ICS text."""

    def fetch(self, url: str) -> str | None:
        """Fetch ICS text from a URL. Returns None if it could not be fetched."""
        ...
